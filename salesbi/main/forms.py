# ==============================================================================
# salesbi/main/forms.py
# ------------------------------------------------------------------------------
# Defines web forms using Flask-WTF for user input and validation.
# Amounts arrive as raw text and are normalized later, so they are never
# validated as numbers here.
# ==============================================================================

from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, InputRequired, Optional

from salesbi.calculator.clients import HISTORICAL_TOP_CLIENTS
from salesbi.calculator.schema import COST_FIELDS, MONTHS, PLANNING_YEARS, SELLERS

YEAR_CHOICES = [(y, y) for y in PLANNING_YEARS]
MONTH_CHOICES = [(m, m) for m in MONTHS]

class AppSettingForm(FlaskForm):
    """Form for editing a single analytics setting."""
    value = TextAreaField('Value', validators=[DataRequired()], render_kw={'rows': 3})
    submit = SubmitField('Save changes')

class RevenueEntryForm(FlaskForm):
    """One seller's realized revenue for a month."""
    year = SelectField('Year', choices=YEAR_CHOICES, validators=[InputRequired(message="Year is required.")])
    month = SelectField('Month', choices=MONTH_CHOICES, validators=[InputRequired(message="Month is required.")])
    seller = SelectField(
        'Seller',
        choices=[(s.value, s.label) for s in SELLERS],
        validators=[InputRequired(message="Please choose a seller.")]
    )
    value = StringField('Amount (R$)', validators=[Optional()])
    submit = SubmitField('Save entry')

class OperationalEntryForm(FlaskForm):
    """One operational cost field for a month."""
    year = SelectField('Year', choices=YEAR_CHOICES, validators=[InputRequired(message="Year is required.")])
    month = SelectField('Month', choices=MONTH_CHOICES, validators=[InputRequired(message="Month is required.")])
    field = SelectField(
        'Cost field',
        choices=[(f.value, f.value) for f in COST_FIELDS],
        validators=[InputRequired(message="Please choose a cost field.")]
    )
    value = StringField('Amount (R$)', validators=[Optional()])
    submit = SubmitField('Save cost')

class ProjectionEntryForm(FlaskForm):
    """A tracked client's projected revenue for a planning year."""
    client_id = SelectField(
        'Client',
        choices=[(c.id, c.name) for c in HISTORICAL_TOP_CLIENTS],
        validators=[InputRequired(message="Please choose a client.")]
    )
    year = SelectField('Year', choices=YEAR_CHOICES, validators=[InputRequired(message="Year is required.")])
    value = StringField('Projection (R$)', validators=[Optional()])
    submit = SubmitField('Save projection')

from salesbi import db
from salesbi.models import AppSetting

DEFAULT_SETTINGS = {
    # key: [value, description, value_type]
    'ANNUAL_TARGET': ['2180000', 'Fixed annual revenue target used for overall attainment', 'float'],
    'STAR_GROWTH_MULTIPLIER': ['1.2', 'A client is STAR when current value > prior value x this multiplier (e.g. 1.2 for +20%)', 'float'],
    'DECLINE_MULTIPLIER': ['0.8', 'A client is DECREASE when current value < prior value x this multiplier (e.g. 0.8 for -20%)', 'float'],
    'LOGISTICS_WARNING_PCT': ['10', 'Month is flagged when logistics cost exceeds this % of realized revenue', 'float'],
    'GOODS_WARNING_PCT': ['50', 'Month is flagged when goods/materials cost exceeds this % of realized revenue', 'float'],
}

def seed_data():
    """Populates the database with default analytics settings."""
    for key, data in DEFAULT_SETTINGS.items():
        setting = AppSetting.query.filter_by(key=key).first()
        if not setting: # Only add if it doesn't exist
            setting = AppSetting(key=key, value=data[0], description=data[1], value_type=data[2])
            db.session.add(setting)
            print(f'Seeding setting: {key}')

    db.session.commit()
    print('Seeding complete.')

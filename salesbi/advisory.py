# ==============================================================================
# salesbi/advisory.py
# ------------------------------------------------------------------------------
# Advisory client: summarizes the dashboard into a short context string and
# asks an LLM for free-form commentary. The reply is passed through as-is.
# ==============================================================================

import logging
from dataclasses import dataclass, field

from openai import OpenAI

SYSTEM_PROMPT = """You are a sales management advisor for an industrial distributor.
You receive a short summary of this year's sales performance: target attainment,
the largest clients and the risk flags raised by the reporting system.
Comment on the situation in plain text and suggest concrete next steps.
Use only the numbers present in the summary; do not invent figures."""


@dataclass
class AdvisoryResult:
    text: str
    sources: list = field(default_factory=list)


def build_advisory_context(dashboard, top_n=3):
    """Short natural-language context: period, attainment, top clients, risk flags."""
    revenue = dashboard['revenue']
    portfolio = dashboard['portfolio']
    opportunity = dashboard['opportunity']
    efficiency = dashboard['efficiency']

    lines = [
        f"Period: {dashboard['month']}/{dashboard['year']}.",
        f"Annual target attainment: {revenue.attainment:.1f}% "
        f"(realized {revenue.total_realized:,.0f} of target {revenue.total_target:,.0f}).",
    ]

    top_clients = [row.name for row in portfolio.rows[:top_n] if row.current > 0]
    if top_clients:
        lines.append(f"Top clients: {', '.join(top_clients)}.")
    else:
        lines.append("Top clients: no client revenue recorded for the year yet.")

    churned = [row.name for row in portfolio.rows if row.status == 'churn']
    if churned:
        lines.append(f"Risk: churned clients: {', '.join(churned)}.")
    if opportunity.total_opportunity_cost > 0:
        lines.append(f"Risk: {len(opportunity.idle_clients)} idle clients, "
                     f"opportunity cost {opportunity.total_opportunity_cost:,.0f}.")
    if efficiency.warning_months:
        lines.append(f"Risk: cost warnings in {', '.join(efficiency.warning_months)}.")
    return "\n".join(lines)


def _extract_sources(message):
    """url_citation annotations, when the model returns any, as {title, uri}."""
    sources = []
    for annotation in getattr(message, 'annotations', None) or []:
        citation = getattr(annotation, 'url_citation', None)
        if citation is None:
            continue
        sources.append({'title': getattr(citation, 'title', '') or '',
                        'uri': getattr(citation, 'url', '') or ''})
    return sources


def request_advisory(context, api_key, model='gpt-4o-mini', max_tokens=400):
    """
    Returns (AdvisoryResult, None) on success, (None, error message) otherwise.
    Never raises: the caller keeps serving metrics whatever happens here.
    """
    if not api_key or not api_key.strip() or api_key.startswith('sk-your'):
        return None, "OPENAI_API_KEY not found. Add it to .env."

    try:
        client = OpenAI(api_key=api_key.strip())
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": context},
            ],
            max_tokens=max_tokens,
            temperature=0.2,
        )
    except Exception as e:
        logging.warning(f"Advisory request failed: {e}")
        return None, f"API error: {str(e)}"

    choice = response.choices[0] if response.choices else None
    if not choice or not choice.message:
        return None, "Empty response from API"

    text = (choice.message.content or "").strip()
    return AdvisoryResult(text=text, sources=_extract_sources(choice.message)), None

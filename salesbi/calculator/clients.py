# ==============================================================================
# salesbi/calculator/clients.py
# ------------------------------------------------------------------------------
# The tracked top-client cohort and its historical revenue. Two history
# shapes exist (per-year values or one pre-aggregated total); both answer
# the same questions through value_for(), total() and average().
# ==============================================================================

from dataclasses import dataclass

from .schema import HISTORICAL_YEARS


class YearlyHistory:
    """History known year by year over the fixed historical window."""

    def __init__(self, values):
        self.values = {int(year): float(amount) for year, amount in values.items()}

    def value_for(self, year):
        return self.values.get(int(year), 0.0) if int(year) in HISTORICAL_YEARS else None

    def total(self):
        return sum(self.values.get(year, 0.0) for year in HISTORICAL_YEARS)

    def average(self):
        return self.total() / len(HISTORICAL_YEARS)


class AggregateHistory:
    """
    History known only as a single sum over the historical window. It cannot
    answer for an individual year, so value_for() returns None.
    """

    def __init__(self, aggregate):
        self.aggregate = float(aggregate)

    def value_for(self, year):
        return None

    def total(self):
        return self.aggregate

    def average(self):
        return self.aggregate / len(HISTORICAL_YEARS)


@dataclass(frozen=True)
class TopClient:
    id: str
    name: str
    history: object


def _client(client_id, name, values):
    return TopClient(id=client_id, name=name, history=YearlyHistory(values))


HISTORICAL_TOP_CLIENTS = (
    _client('c1', 'MACCAFERRI DO BRASIL LTDA', {2021: 284869, 2022: 50161, 2023: 104303, 2024: 135998, 2025: 57016}),
    _client('c2', 'FERTIPAR BANDEIRANTES LTDA', {2021: 62158, 2022: 99953, 2023: 245829, 2024: 560605, 2025: 786692}),
    _client('c3', 'PLASTEK DO BRASIL IND E COM LTDA', {2021: 143580, 2022: 126538, 2023: 52269, 2024: 16275, 2025: 18309}),
    _client('c4', 'TEX EQUIPAMENTOS ELETRONICOS', {2021: 82418, 2022: 77266, 2023: 105537, 2024: 121464, 2025: 123748}),
    _client('c5', 'CONFIBRA INDUSTRIA E COMERCIO', {2021: 75438, 2022: 120144, 2023: 64626, 2024: 45824, 2025: 46212}),
    _client('c6', 'AJINOMOTO DO BRASIL LTDA', {2021: 75186, 2022: 19467, 2023: 53603, 2024: 55354, 2025: 44257}),
    _client('c7', 'CJ DO BRASIL PROD ALIMENTICIOS', {2021: 64585, 2022: 98068, 2023: 0, 2024: 200000, 2025: 13353}),
    _client('c8', 'IGARATIBA IND E COM LTDA', {2021: 47469, 2022: 38007, 2023: 51410, 2024: 55703, 2025: 27566}),
    _client('c9', 'CLARIOS ENERGY SOLUTIONS', {2021: 28570, 2022: 48064, 2023: 49474, 2024: 0, 2025: 13258}),
    _client('c10', 'ITURRI COIMPAR INDUSTRIA', {2021: 22199, 2022: 71398, 2023: 76310, 2024: 0, 2025: 0}),
    _client('c11', 'ELEKEIROZ S/A', {2021: 15957, 2022: 45817, 2023: 30596, 2024: 25631, 2025: 30809}),
    _client('c12', 'AQUAGEL REFRIGERACAO LTDA', {2021: 0, 2022: 68222, 2023: 108894, 2024: 83043, 2025: 74082}),
    _client('c13', 'SIKA S.A.', {2021: 0, 2022: 0, 2023: 0, 2024: 0, 2025: 44211}),
    _client('c14', 'USINA ACUCAREIRA ESTER SA', {2021: 0, 2022: 0, 2023: 0, 2024: 36961, 2025: 43178}),
    _client('c15', 'GLOBAL FLEX IND E CONSERTO', {2021: 0, 2022: 0, 2023: 0, 2024: 29022, 2025: 71597}),
    _client('c16', 'EMS S/A', {2021: 0, 2022: 0, 2023: 0, 2024: 0, 2025: 16600}),
    _client('c17', 'SUDESTE AUTOMACAO EIRELI', {2021: 0, 2022: 0, 2023: 0, 2024: 0, 2025: 15682}),
    _client('c18', 'JV FERRAMENTARIA LTDA', {2021: 0, 2022: 0, 2023: 0, 2024: 0, 2025: 14941}),
    _client('c19', 'PAIS E FILHOS USINAGEM LTDA', {2021: 0, 2022: 69586, 2023: 51720, 2024: 12736, 2025: 0}),
    _client('c20', 'MIURA BOILER DO BRASIL LTDA', {2021: 12187, 2022: 0, 2023: 16133, 2024: 0, 2025: 0}),
)

"""Stadium coordinates keyed by home team abbreviation.

Used by the weather client to resolve a host venue. Teams sharing a stadium
share coordinates; a team missing from this table gets no weather reading.
"""

from typing import NamedTuple


class Coordinates(NamedTuple):
    lat: float
    lon: float


STADIUM_COORDINATES: dict[str, Coordinates] = {
    "ATL": Coordinates(33.7553, -84.4006),  # Mercedes-Benz Stadium
    "BAL": Coordinates(39.2783, -76.6222),  # M&T Bank Stadium
    "BUF": Coordinates(42.7737, -78.7870),  # Highmark Stadium
    "CAR": Coordinates(35.2253, -80.8431),  # Bank of America Stadium
    "CHI": Coordinates(41.8623, -87.6167),  # Soldier Field
    "CIN": Coordinates(39.0955, -84.5160),  # Paycor Stadium
    "CLE": Coordinates(41.5061, -81.6996),  # Huntington Bank Field
    "DAL": Coordinates(32.7478, -97.0928),  # AT&T Stadium
    "DEN": Coordinates(39.7439, -105.0200),  # Empower Field at Mile High
    "DET": Coordinates(42.3400, -83.0456),  # Ford Field
    "GB": Coordinates(44.5013, -88.0622),  # Lambeau Field
    "HOU": Coordinates(29.6847, -95.4107),  # NRG Stadium
    "IND": Coordinates(39.7601, -86.1639),  # Lucas Oil Stadium
    "JAX": Coordinates(30.3239, -81.6377),  # EverBank Stadium
    "KC": Coordinates(39.0489, -94.4839),  # Arrowhead Stadium
    "LAC": Coordinates(33.9533, -118.3388),  # SoFi Stadium
    "LAR": Coordinates(33.9533, -118.3388),  # SoFi Stadium
    "LV": Coordinates(36.0908, -115.1807),  # Allegiant Stadium
    "MIA": Coordinates(25.9580, -80.2389),  # Hard Rock Stadium
    "MIN": Coordinates(44.9740, -93.2583),  # U.S. Bank Stadium
    "NE": Coordinates(42.0909, -71.2643),  # Gillette Stadium
    "NO": Coordinates(29.9508, -90.0811),  # Caesars Superdome
    "NYG": Coordinates(40.8128, -74.0741),  # MetLife Stadium
    "NYJ": Coordinates(40.8128, -74.0741),  # MetLife Stadium
    "PHI": Coordinates(39.9010, -75.1675),  # Lincoln Financial Field
    "PIT": Coordinates(40.4468, -80.0158),  # Acrisure Stadium
    "SEA": Coordinates(47.5952, -122.3316),  # Lumen Field
    "SF": Coordinates(37.4033, -121.9694),  # Levi's Stadium
    "TB": Coordinates(27.9759, -82.5033),  # Raymond James Stadium
    "TEN": Coordinates(36.1664, -86.7714),  # Nissan Stadium
    "WAS": Coordinates(38.9076, -76.8645),  # Northwest Stadium
}


def get_stadium_coordinates(team_abbr: str) -> Coordinates | None:
    """Look up stadium coordinates for a team (case-insensitive).

    Args:
        team_abbr: Team abbreviation (e.g., "KC", "gb")

    Returns:
        Coordinates if the team has a known stadium, None otherwise
    """
    return STADIUM_COORDINATES.get(team_abbr.upper())

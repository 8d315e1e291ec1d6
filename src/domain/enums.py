"""Domain enumerations for charging stations."""

import enum


class StationStatus(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class ConnectorType(str, enum.Enum):
    TYPE_1 = "Type 1"
    TYPE_2 = "Type 2"
    CCS = "CCS"
    CHADEMO = "CHAdeMO"
    TESLA = "Tesla"


# Query-string value meaning "do not filter on this field"
FILTER_ALL = "all"

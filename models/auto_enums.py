from enum import Enum


class AutoKind(str, Enum):
    """Кузов автомобиля."""
    SUV = "SUV"
    LIMOUSINE = "LIMOUSINE"
    CABRIO = "CABRIO"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class KeywordFlag(str, Enum):
    """Флаги-ключевые слова, по которым можно фильтровать поиск."""
    COMFORT = "comfort"
    SPORT = "sport"
    ELECTRIC = "electric"
    HYBRID = "hybrid"

    @property
    def keyword(self) -> str:
        """Ключевое слово в том виде, в каком оно хранится в БД."""
        return self.value.upper()

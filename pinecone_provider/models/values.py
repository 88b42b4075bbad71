"""
Index value types: distance metric, pod type and metadata-index configuration.
Each has one canonical string form and rejects anything else at parse time.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

POD_CLASSES = ("s1", "p1", "p2")
POD_SIZES = ("x1", "x2", "x4", "x8")


class InvalidMetricError(ValueError):
    """Raised for a metric string or code outside the fixed set."""


class InvalidPodTypeError(ValueError):
    """Raised for a pod type that is not <class>.<size> from the fixed sets."""


class InvalidMetadataConfigError(ValueError):
    """Raised for a metadata config that lists no fields."""


class Metric(str, Enum):
    """Distance function of an index. Codes follow declaration order (euclidean=0)."""

    EUCLIDEAN = "euclidean"
    COSINE = "cosine"
    DOTPRODUCT = "dotproduct"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Metric":
        """Exact lowercase match only; "Cosine" or " cosine" are errors."""
        for metric in cls:
            if metric.value == value:
                return metric
        raise InvalidMetricError(f"invalid metric value: {value}")

    @property
    def code(self) -> int:
        return list(type(self)).index(self)

    @classmethod
    def from_code(cls, code: int) -> "Metric":
        """
        Map an ordinal code back to a metric. Out-of-range codes raise instead of
        falling back to a default, on this path and on the string path alike.
        """
        members = list(cls)
        if isinstance(code, bool) or not isinstance(code, int) or not 0 <= code < len(members):
            raise InvalidMetricError(f"invalid metric code: {code!r}")
        return members[code]


def _split_pod_type(value: str) -> tuple[str, str]:
    parts = value.split(".")
    if len(parts) != 2:
        raise InvalidPodTypeError(f"invalid pod type: {value}")
    return parts[0], parts[1]


def _check_pod_parts(pod_class: str, size: str) -> None:
    if pod_class not in POD_CLASSES:
        raise InvalidPodTypeError(f"invalid pod class: {pod_class}")
    if size not in POD_SIZES:
        raise InvalidPodTypeError(f"invalid pod size: {size}")


class PodType(BaseModel):
    """
    Pod class (s1, p1, p2) and size (x1, x2, x4, x8). Class and size are checked
    independently, so all 12 pairs are valid. Serializes to "<class>.<size>".
    """

    model_config = ConfigDict(frozen=True)

    pod_class: str
    size: str

    @classmethod
    def parse(cls, value: str) -> "PodType":
        pod_class, size = _split_pod_type(value)
        _check_pod_parts(pod_class, size)
        return cls(pod_class=pod_class, size=size)

    @model_validator(mode="before")
    @classmethod
    def _accept_string(cls, data):
        if isinstance(data, str):
            pod_class, size = _split_pod_type(data)
            return {"pod_class": pod_class, "size": size}
        return data

    @model_validator(mode="after")
    def _check_parts(self):
        _check_pod_parts(self.pod_class, self.size)
        return self

    @model_serializer
    def _to_string(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"{self.pod_class}.{self.size}"


DEFAULT_POD_TYPE = "p1.x1"


class MetadataConfig(BaseModel):
    """Metadata fields indexed for filtering. Absent config is None, never an empty list."""

    indexed: list[str] = Field(..., min_length=1)

    @classmethod
    def from_fields(cls, indexed: list[str] | None) -> "MetadataConfig | None":
        """None when no list is given; an empty list is an error."""
        if indexed is None:
            return None
        if not indexed:
            raise InvalidMetadataConfigError("metadata_config.indexed must list at least one field")
        return cls(indexed=list(indexed))

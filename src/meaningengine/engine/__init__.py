"""Engine domain: operators, entry filters and the engine facade."""

from meaningengine.engine.facade import ENGINE_VERSION
from meaningengine.engine.facade import MeaningEngine
from meaningengine.engine.filters import Contains
from meaningengine.engine.filters import EntryQuery
from meaningengine.engine.filters import Equals
from meaningengine.engine.filters import FieldCondition
from meaningengine.engine.filters import FilterCondition
from meaningengine.engine.filters import GreaterOrEqual
from meaningengine.engine.filters import GreaterThan
from meaningengine.engine.filters import In
from meaningengine.engine.filters import LessOrEqual
from meaningengine.engine.filters import LessThan
from meaningengine.engine.filters import NotEqual
from meaningengine.engine.filters import NotIn
from meaningengine.engine.filters import where
from meaningengine.engine.operators import OperatorEngine

__all__ = [
    "ENGINE_VERSION",
    "Contains",
    "EntryQuery",
    "Equals",
    "FieldCondition",
    "FilterCondition",
    "GreaterOrEqual",
    "GreaterThan",
    "In",
    "LessOrEqual",
    "LessThan",
    "MeaningEngine",
    "NotEqual",
    "NotIn",
    "OperatorEngine",
    "where",
]

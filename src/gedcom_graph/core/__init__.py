from gedcom_graph.core.exceptions import (
    AnalysisError,
    CycleError,
    DuplicateEventError,
    GedcomError,
    GedcomSyntaxError,
    MalformedDataError,
    MissingDataError,
    ParseError,
    UnhandledTagError,
    UnhandledTokenError,
    UnhandledValueError,
)

__all__ = [
    "AnalysisError",
    "CycleError",
    "DuplicateEventError",
    "GedcomError",
    "GedcomSyntaxError",
    "MalformedDataError",
    "MissingDataError",
    "ParseError",
    "UnhandledTagError",
    "UnhandledTokenError",
    "UnhandledValueError",
]

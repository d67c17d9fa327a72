"""sqltemplate.core -- the templated SQL execution layer.

Architecture::

    Layer 1 -- Contracts & Errors
        protocols.py       ConnectionFactory, Connection, Statement, ResultCursor,
                           RowMapper, ParameterBinder, ResultExtractor
        errors.py          TemplateError hierarchy (DataAccessError, MappingError)

    Layer 2 -- Strategies
        binding.py         ParamKind, PositionalBinder, TypedBinder
        extraction.py      SingleRowExtractor, RowListExtractor, ExactCountExtractor
        mappers.py         DictRowMapper, ColumnMapper

    Layer 3 -- Execution
        scope.py           ReleaseScope (reverse-order, best-effort release)
        template.py        SqlTemplate

    Layer 4 -- Drivers & Cross-Cutting Concerns
        adapters/          DB-API bridge, SQLite and PostgreSQL factories
        logging.py         structlog configuration
        settings.py        TemplateSettings (pydantic-settings)
"""

from sqltemplate.core.binding import ParamKind, PositionalBinder, TypedBinder
from sqltemplate.core.errors import (
    AcquisitionError,
    BindingError,
    ConfigError,
    DataAccessError,
    ErrorCategory,
    ErrorContext,
    ExecutionError,
    IncorrectResultSizeError,
    MappingError,
    PreparationError,
    ReleaseError,
    TemplateError,
    is_retryable,
)
from sqltemplate.core.extraction import (
    AFFECTED_ROWS,
    AffectedRowCount,
    ExactCountExtractor,
    RowListExtractor,
    SingleRowExtractor,
)
from sqltemplate.core.logging import configure_logging, get_logger
from sqltemplate.core.mappers import ColumnMapper, DictRowMapper
from sqltemplate.core.protocols import (
    Connection,
    ConnectionFactory,
    ParameterBinder,
    ResultCursor,
    ResultExtractor,
    RowMapper,
    Statement,
    StatementMode,
)
from sqltemplate.core.scope import ReleaseScope
from sqltemplate.core.template import SqlTemplate

__all__ = [
    # Protocols
    "Connection",
    "ConnectionFactory",
    "ParameterBinder",
    "ResultCursor",
    "ResultExtractor",
    "RowMapper",
    "Statement",
    "StatementMode",
    # Errors
    "TemplateError",
    "ErrorCategory",
    "ErrorContext",
    "DataAccessError",
    "AcquisitionError",
    "PreparationError",
    "BindingError",
    "ExecutionError",
    "ReleaseError",
    "MappingError",
    "IncorrectResultSizeError",
    "ConfigError",
    "is_retryable",
    # Strategies
    "ParamKind",
    "PositionalBinder",
    "TypedBinder",
    "SingleRowExtractor",
    "RowListExtractor",
    "ExactCountExtractor",
    "AffectedRowCount",
    "AFFECTED_ROWS",
    "DictRowMapper",
    "ColumnMapper",
    # Execution
    "ReleaseScope",
    "SqlTemplate",
    # Logging
    "configure_logging",
    "get_logger",
]

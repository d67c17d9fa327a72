"""
sqltemplate - templated SQL execution with guaranteed resource cleanup.

    from sqltemplate import SqlTemplate, create_factory

    template = SqlTemplate(create_factory("sqlite:///app.db"))
    users = template.query_for_list("select * from users", user_mapper)
"""

__version__ = "0.1.0"

from sqltemplate.core import *  # noqa
from sqltemplate.core import __all__ as _core_all
from sqltemplate.core.adapters import create_factory

__all__ = [*_core_all, "create_factory", "__version__"]

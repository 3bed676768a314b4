# Import models here so Base.metadata sees every table.
from notevault.models.tenant import Tenant  # noqa: F401
from notevault.models.user import User  # noqa: F401
from notevault.models.note import Note  # noqa: F401

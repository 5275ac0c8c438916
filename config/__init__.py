# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                      CONFIGURATION PACKAGE INITIALIZER                     ║
# ║                                                                            ║
# ║  Centralizes configuration for Schedule Nudge: the chat → calendar         ║
# ║  mapping store and startup validation of required settings.                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

from .group_config import (
    GroupConfigStore,       # In-memory chat → calendar mapping
    GroupMapping,           # One mapping record
    DEFAULT_GROUP_NAME,     # Name used when a snapshot omits groupName
)
from .settings import (
    validate_required_config,  # Check required credentials before a run
    get_config_summary,        # Non-secret overview for startup logs
)

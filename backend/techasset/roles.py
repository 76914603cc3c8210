# Overview: Role names and the allow-lists used by route decorators.

GLOBAL_ADMIN = "global-admin"
ADMIN = "admin"
EDITOR = "editor"
MODULE_ADMIN = "module-admin"
STANDARD_USER = "standard-user"

ALL_ROLES = (GLOBAL_ADMIN, ADMIN, EDITOR, MODULE_ADMIN, STANDARD_USER)

# Roles whose access is narrowed by a per-user module list
MODULE_SCOPED_ROLES = (MODULE_ADMIN, STANDARD_USER)

# Allow-lists
DEVICE_CHECK_WRITERS = (ADMIN, GLOBAL_ADMIN, EDITOR)
USER_VIEWERS = (ADMIN, GLOBAL_ADMIN)
SUPERUSER_ONLY = (GLOBAL_ADMIN,)

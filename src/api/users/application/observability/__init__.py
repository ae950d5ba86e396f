"""Domain-Oriented Observability for the users application layer.

Probes for application operations following Domain-Oriented Observability patterns.
"""

from users.application.observability.admin_audit_probe import (
    AdminAuditProbe,
    DefaultAdminAuditProbe,
)
from users.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from users.application.observability.request_error_probe import (
    DefaultRequestErrorProbe,
    RequestErrorProbe,
)
from users.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AdminAuditProbe",
    "DefaultAdminAuditProbe",
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "RequestErrorProbe",
    "DefaultRequestErrorProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
]

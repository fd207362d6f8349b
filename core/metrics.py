from prometheus_client import Counter, Gauge

AUTHORIZATION_DECISIONS_COUNTER = Counter(
    'rbac_authorization_decisions_total',
    'Authorization decisions made by the gate',
    ['decision'],
)

REGISTERED_ROLES_GAUGE = Gauge(
    'rbac_registered_roles',
    'Number of roles in the most recently loaded registry'
)

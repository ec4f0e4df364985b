"""Component type taxonomy.

Every per-type fact the generators need lives in one table keyed by
``ComponentType``. ``TAXONOMY`` is checked for exhaustiveness at import time,
so adding a seventh component type without describing it fails loudly instead
of silently producing empty sections.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sketchforge.graph.models import ComponentType


@dataclass(frozen=True)
class AntiResponsibility:
    """A forbidden action paired with the reason it is forbidden."""

    pattern: str
    reason: str

    def render(self) -> str:
        return f"NEVER {self.pattern} — {self.reason}"


@dataclass(frozen=True)
class TypeField:
    """A type-specific spec field.

    ``value`` is None when the field cannot be derived from the graph and
    must be filled in by a follow-up pass.
    """

    name: str
    value: str | None = None


@dataclass(frozen=True)
class TypeInfo:
    """Static description of one component type.

    Attributes:
        rank: Build rank (1-6); lower ranks are built first
        label: Human-readable type name
        description: Short description used in generated prose
        build_rationale: Why components of this type sit where they do in the build order
        responsibilities: Default responsibility seeds
        anti_responsibilities: Default NEVER statements with reasons
        security: Security constraints; the first two feed the project rules
        tech_hint: Generic stack suggestion used when no stack is given
        boundary_present: IS statement when the type is present, if any
        boundary_absent: IS NOT statement when the type is absent, if any
        spec_section: Heading of the type-specific section in component specs
        fields: Type-specific fields rendered into component specs
        validation: Type-specific verification checklist items
    """

    rank: int
    label: str
    description: str
    build_rationale: str
    responsibilities: tuple[str, ...]
    anti_responsibilities: tuple[AntiResponsibility, ...]
    security: tuple[str, ...]
    tech_hint: str
    boundary_present: str | None
    boundary_absent: str | None
    spec_section: str
    fields: tuple[TypeField, ...] = field(default_factory=tuple)
    validation: tuple[str, ...] = field(default_factory=tuple)


TAXONOMY: dict[ComponentType, TypeInfo] = {
    ComponentType.storage: TypeInfo(
        rank=1,
        label="Storage",
        description="Databases, file storage, and caching layers",
        build_rationale="Schema and data layer first (everything depends on data)",
        responsibilities=(
            "Persist all business data with referential integrity",
            "Provide transactional guarantees for operations",
            "Support efficient queries via proper indexing",
            "Maintain data consistency and backup recovery",
        ),
        anti_responsibilities=(
            AntiResponsibility(
                "expose direct connections to frontend", "backend is the gateway"
            ),
            AntiResponsibility(
                "store computed values that can be derived",
                "calculate at query time or cache separately",
            ),
            AntiResponsibility(
                "use database triggers for business logic",
                "keep it in the application layer for testability",
            ),
            AntiResponsibility(
                "store large files or blobs directly", "use object storage and store URLs"
            ),
        ),
        security=(
            "Encrypt sensitive columns at rest",
            "Use minimal privilege database users",
            "Audit log for sensitive data access",
            "Implement row-level security if supported",
        ),
        tech_hint="PostgreSQL, MySQL, MongoDB, or similar",
        boundary_present="A system with persistent data storage",
        boundary_absent=None,
        spec_section="Storage Notes",
        fields=(
            TypeField("Schema"),
            TypeField("Backup Strategy"),
            TypeField("Indexes", "Define based on query patterns; index all foreign keys"),
        ),
        validation=(
            "Migrations run successfully",
            "Seed data loads",
            "Indexes created",
        ),
    ),
    ComponentType.auth: TypeInfo(
        rank=2,
        label="Auth",
        description="Authentication, authorization, and user management",
        build_rationale="Authentication before protected features",
        responsibilities=(
            "Authenticate users via secure credential verification",
            "Generate and validate session tokens or JWTs",
            "Enforce access control and permission checks",
            "Handle password reset and account recovery flows",
        ),
        anti_responsibilities=(
            AntiResponsibility(
                "store plain-text passwords", "use bcrypt, argon2, or similar"
            ),
            AntiResponsibility(
                "implement custom encryption", "use battle-tested libraries"
            ),
            AntiResponsibility(
                "trust authentication tokens without verification",
                "validate signatures and expiry",
            ),
            AntiResponsibility(
                "skip rate limiting on auth endpoints", "prevents brute force attacks"
            ),
        ),
        security=(
            "Use bcrypt or argon2 for password hashing",
            "Implement multi-factor authentication for sensitive operations",
            "Set short expiry times for session tokens",
            "Revoke tokens on logout or password change",
            "Rate limit authentication attempts",
        ),
        tech_hint="JWT, OAuth2, or session-based authentication",
        boundary_present="A system with user authentication and authorization",
        boundary_absent=None,
        spec_section="Auth Notes",
        fields=(
            TypeField("Auth Strategy"),
            TypeField("Token Expiry"),
            TypeField("Providers"),
        ),
        validation=(
            "Login/logout flows work",
            "Token validation functional",
            "Protected routes secured",
        ),
    ),
    ComponentType.backend: TypeInfo(
        rank=3,
        label="Backend",
        description="API endpoints, server logic, and business rules",
        build_rationale="Business logic and data access",
        responsibilities=(
            "Validate all incoming request payloads",
            "Enforce authentication and authorization rules",
            "Execute business logic and data transformations",
            "Return consistent, well-structured API responses",
        ),
        anti_responsibilities=(
            AntiResponsibility(
                "render HTML or serve static files", "API-only, frontend handles UI"
            ),
            AntiResponsibility(
                "trust client-provided IDs for authorization", "always verify ownership"
            ),
            AntiResponsibility(
                "expose internal error details to clients",
                "log internally, return safe messages",
            ),
            AntiResponsibility(
                "store secrets in code or version control", "use environment variables"
            ),
        ),
        security=(
            "Validate ALL inputs with schema validation library",
            "Use parameterized queries to prevent SQL injection",
            "Implement rate limiting on all endpoints",
            "Set secure HTTP headers (helmet.js or equivalent)",
        ),
        tech_hint="Node.js + Express, FastAPI, or similar",
        boundary_present="An API service handling business logic and data access",
        boundary_absent=None,
        spec_section="API Notes",
        fields=(
            TypeField("API Style"),
            TypeField("Endpoint Patterns"),
            TypeField("Auth Middleware"),
            TypeField("Error Format", "`{ error: string, code: string }`"),
        ),
        validation=(
            "All endpoints return correct status codes",
            "Auth middleware functional",
            "Error responses match format",
        ),
    ),
    ComponentType.frontend: TypeInfo(
        rank=4,
        label="Frontend",
        description="UI components, pages, and client-side logic",
        build_rationale="UI consuming the backend services",
        responsibilities=(
            "Render user interface components and pages",
            "Handle user interactions and form submissions",
            "Manage client-side state and routing",
            "Communicate with backend APIs for data",
        ),
        anti_responsibilities=(
            AntiResponsibility(
                "store sensitive data in localStorage or client state",
                "easily accessible by malicious scripts",
            ),
            AntiResponsibility(
                "trust client-side validation alone", "always re-validate server-side"
            ),
            AntiResponsibility(
                "make direct database connections", "all data goes through backend APIs"
            ),
            AntiResponsibility(
                "implement business logic in UI", "keep components presentational"
            ),
        ),
        security=(
            "Sanitize all user inputs to prevent XSS attacks",
            "Use HTTPS only for API communications",
            "Implement Content Security Policy headers",
        ),
        tech_hint="React, Vue, or similar modern framework",
        boundary_present="A user-facing web application with interactive UI",
        boundary_absent="A user-facing UI (backend/API only)",
        spec_section="Frontend Notes",
        fields=(
            TypeField("Routing"),
            TypeField("State Management"),
            TypeField("Accessibility", "WCAG 2.1 AA compliance"),
        ),
        validation=(
            "Renders without console errors",
            "Responsive at 320px, 768px, 1024px",
            "All user flows tested",
        ),
    ),
    ComponentType.external: TypeInfo(
        rank=5,
        label="External",
        description="Third-party APIs and external service integrations",
        build_rationale="External integrations (can be added incrementally)",
        responsibilities=(
            "Integrate with third-party service APIs",
            "Handle rate limits and retry logic",
            "Transform external data formats to internal schemas",
            "Manage API credentials securely via environment variables",
        ),
        anti_responsibilities=(
            AntiResponsibility(
                "store API keys in code", "use environment variables and secret management"
            ),
            AntiResponsibility(
                "assume the external service is always available",
                "implement fallback behavior",
            ),
            AntiResponsibility(
                "trust external data without validation", "sanitize and verify all inputs"
            ),
            AntiResponsibility(
                "ignore rate limits", "respect API quotas to prevent service suspension"
            ),
        ),
        security=(
            "Store API keys in environment variables, never in code",
            "Validate webhook signatures to prevent spoofing",
            "Use OAuth with minimal required scopes",
            "Rotate API keys periodically",
        ),
        tech_hint="Official SDK for target service",
        boundary_present="A system integrating with external third-party services",
        boundary_absent="A system with extensive third-party integrations",
        spec_section="External Service Notes",
        fields=(
            TypeField("Provider"),
            TypeField("API Version"),
            TypeField("Rate Limits"),
            TypeField(
                "Error Handling",
                "Circuit breaker for repeated failures; log provider errors with correlation IDs",
            ),
        ),
        validation=(
            "API connection verified",
            "Error handling for failures",
            "Rate limiting respected",
        ),
    ),
    ComponentType.background: TypeInfo(
        rank=6,
        label="Background",
        description="Background jobs, cron tasks, and queue workers",
        build_rationale="Background jobs (non-blocking, lower priority)",
        responsibilities=(
            "Execute scheduled or event-driven background tasks",
            "Process items from job queues reliably",
            "Implement retry logic with exponential backoff",
            "Monitor job failures and send alerts",
        ),
        anti_responsibilities=(
            AntiResponsibility("assume jobs run exactly once", "design for idempotency"),
            AntiResponsibility(
                "block critical paths with long-running jobs",
                "queue and process asynchronously",
            ),
            AntiResponsibility("ignore failed jobs", "implement monitoring and alerting"),
            AntiResponsibility(
                "store job state only in memory", "use a persistent queue for reliability"
            ),
        ),
        security=(
            "Validate job payloads before processing",
            "Run jobs with minimal required permissions",
            "Audit log for sensitive background operations",
        ),
        tech_hint="Redis/Bull, Celery, or similar job queue",
        boundary_present="A system with asynchronous background processing",
        boundary_absent="A background job processing system (synchronous only)",
        spec_section="Job Notes",
        fields=(
            TypeField("Queue"),
            TypeField("Jobs"),
            TypeField("Retry Policy"),
            TypeField("Monitoring"),
        ),
        validation=(
            "Jobs enqueue correctly",
            "Retry logic works",
            "Failures logged",
        ),
    ),
}


def _check_exhaustive() -> None:
    missing = set(ComponentType) - set(TAXONOMY)
    if missing:
        names = ", ".join(sorted(t.value for t in missing))
        raise RuntimeError(f"TAXONOMY is missing component types: {names}")
    ranks = sorted(info.rank for info in TAXONOMY.values())
    if ranks != list(range(1, len(ComponentType) + 1)):
        raise RuntimeError(f"TAXONOMY ranks must be 1..{len(ComponentType)}, got {ranks}")


_check_exhaustive()


def type_info(component_type: ComponentType) -> TypeInfo:
    """Look up the static description of a component type."""
    return TAXONOMY[component_type]


def types_by_rank() -> list[ComponentType]:
    """Return all component types ordered by build rank."""
    return sorted(TAXONOMY, key=lambda t: TAXONOMY[t].rank)

"""Curated package registry.

Maps technology display labels to verified package coordinates. Versions here
are curated facts and are the single source of truth for both generation
paths; nothing in the codebase computes or guesses a version.

Keys qualified with ``-python`` hold the Python variant of a label whose
package differs by language (databases, AI provider clients, HTTP clients).

Versions verified 2025-12-19. Downstream agents should still confirm the
latest stable release before installing.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict


class RegistryKind(str, enum.Enum):
    """Package index a coordinate is published on."""

    npm = "npm"
    pypi = "pypi"
    nuget = "nuget"
    maven = "maven"
    cargo = "cargo"
    go = "go"


class PackageCoordinate(BaseModel):
    """A verified package reference.

    Attributes:
        name: Package name on its registry
        version_constraint: Version or range exactly as curated
        purpose: One-line description of what the package is for
        docs_url: Official documentation URL
        registry_kind: Package index the name belongs to
        is_runtime_companion: True for packages required alongside the
            primary one (e.g. the ASGI server for FastAPI)
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version_constraint: str
    purpose: str
    docs_url: str
    registry_kind: RegistryKind
    is_runtime_companion: bool = False


def _pkg(
    name: str,
    version: str,
    purpose: str,
    docs: str,
    registry: RegistryKind,
    companion: bool = False,
) -> PackageCoordinate:
    return PackageCoordinate(
        name=name,
        version_constraint=version,
        purpose=purpose,
        docs_url=docs,
        registry_kind=registry,
        is_runtime_companion=companion,
    )


_NPM = RegistryKind.npm
_PYPI = RegistryKind.pypi

KNOWN_PACKAGES: dict[str, tuple[PackageCoordinate, ...]] = {
    # Languages
    "TypeScript": (
        _pkg("typescript", "^5.9.0", "TypeScript compiler", "https://www.typescriptlang.org/docs", _NPM),
    ),
    "JavaScript": (
        _pkg("node", ">=22.0.0", "Node.js runtime (LTS)", "https://nodejs.org/docs/latest-v22.x/api/", _NPM),
    ),
    "Python": (
        _pkg("python", ">=3.12", "Python runtime", "https://docs.python.org/3/", _PYPI),
    ),
    "Java": (
        _pkg("java", ">=21", "Java runtime (LTS)", "https://docs.oracle.com/en/java/", RegistryKind.maven),
    ),
    "C# / .NET": (
        _pkg("dotnet", ">=10.0", ".NET runtime", "https://learn.microsoft.com/dotnet", RegistryKind.nuget),
    ),
    "Go": (
        _pkg("go", ">=1.23", "Go runtime", "https://go.dev/doc/", RegistryKind.go),
    ),
    "Rust": (
        _pkg("rust", ">=1.83", "Rust toolchain", "https://doc.rust-lang.org/", RegistryKind.cargo),
    ),
    # Frontend frameworks
    "Next.js": (
        _pkg("next", "^16.1.0", "React framework for production", "https://nextjs.org/docs", _NPM),
        _pkg("react", "^19.2.3", "React library", "https://react.dev", _NPM, companion=True),
    ),
    "React (Vite)": (
        _pkg("react", "^19.2.3", "React library", "https://react.dev", _NPM),
        _pkg("vite", "^7.3.0", "Build tool", "https://vitejs.dev", _NPM, companion=True),
    ),
    "Vue 3": (
        _pkg("vue", "^3.5.0", "Vue.js framework", "https://vuejs.org", _NPM),
    ),
    "Angular": (
        _pkg("@angular/core", "^21.0.6", "Angular framework", "https://angular.dev", _NPM),
    ),
    "SvelteKit": (
        _pkg("@sveltejs/kit", "^2.49.2", "SvelteKit framework", "https://kit.svelte.dev", _NPM),
        _pkg("svelte", "^5.46.0", "Svelte compiler", "https://svelte.dev", _NPM, companion=True),
    ),
    # Backend frameworks
    "Express": (
        _pkg("express", "^5.2.1", "Node.js web framework", "https://expressjs.com", _NPM),
    ),
    "FastAPI": (
        _pkg("fastapi", ">=0.125.0", "Python web framework", "https://fastapi.tiangolo.com", _PYPI),
        _pkg("uvicorn", ">=0.38.0", "ASGI server (required runtime)", "https://www.uvicorn.org", _PYPI, companion=True),
    ),
    "Spring Boot": (
        _pkg(
            "org.springframework.boot:spring-boot-starter-webmvc",
            "4.0.1",
            "Spring Boot web starter",
            "https://spring.io/projects/spring-boot",
            RegistryKind.maven,
        ),
    ),
    "ASP.NET Core": (
        _pkg(
            "Microsoft.AspNetCore.App.Ref",
            "10.0.1",
            "ASP.NET Core runtime",
            "https://learn.microsoft.com/aspnet/core",
            RegistryKind.nuget,
        ),
    ),
    "Django": (
        _pkg("django", ">=6.0", "Python web framework", "https://docs.djangoproject.com", _PYPI),
    ),
    "Gin": (
        _pkg("github.com/gin-gonic/gin", "v1.11.0", "Go HTTP framework", "https://gin-gonic.com", RegistryKind.go),
    ),
    "Hono": (
        _pkg("hono", "^4.11.1", "Lightweight web framework", "https://hono.dev", _NPM),
    ),
    "Actix Web": (
        _pkg("actix-web", ">=4.11.0", "High-performance Rust web framework", "https://actix.rs/docs", RegistryKind.cargo),
        _pkg("tokio", ">=1.48.0", "Async runtime for Rust", "https://tokio.rs", RegistryKind.cargo, companion=True),
    ),
    # Desktop frameworks
    "Electron": (
        _pkg("electron", "^39.2.7", "Desktop app framework", "https://electronjs.org", _NPM),
    ),
    "Tauri": (
        _pkg("@tauri-apps/api", "^2.9.1", "Tauri frontend bindings", "https://tauri.app", _NPM),
    ),
    # Databases
    "PostgreSQL": (
        _pkg("pg", "^8.16.3", "PostgreSQL client for Node.js", "https://node-postgres.com", _NPM),
    ),
    "PostgreSQL-python": (
        _pkg("psycopg2-binary", ">=2.9.11", "PostgreSQL adapter for Python", "https://www.psycopg.org", _PYPI),
    ),
    "MySQL": (
        _pkg("mysql2", "^3.16.0", "MySQL client for Node.js", "https://sidorares.github.io/node-mysql2", _NPM),
    ),
    "MySQL-python": (
        _pkg("pymysql", ">=1.1.0", "MySQL client for Python", "https://pymysql.readthedocs.io", _PYPI),
    ),
    "Supabase": (
        _pkg("@supabase/supabase-js", "^2.89.0", "Supabase client", "https://supabase.com/docs", _NPM),
    ),
    "Supabase-python": (
        _pkg("supabase", ">=2.27.0", "Supabase client for Python", "https://supabase.com/docs/reference/python", _PYPI),
    ),
    "SQLite": (
        _pkg("better-sqlite3", "^11.7.0", "SQLite for Node.js", "https://github.com/WiseLibs/better-sqlite3", _NPM),
    ),
    "SQLite-python": (
        _pkg("sqlite3", "stdlib", "SQLite (Python stdlib)", "https://docs.python.org/3/library/sqlite3.html", _PYPI),
    ),
    "MongoDB": (
        _pkg("mongodb", "^7.0.0", "MongoDB driver for Node.js", "https://mongodb.github.io/node-mongodb-native/", _NPM),
    ),
    "MongoDB-python": (
        _pkg("pymongo", ">=4.15.5", "MongoDB driver for Python", "https://pymongo.readthedocs.io", _PYPI),
    ),
    # AI providers
    "OpenAI": (
        _pkg("openai", "^4.77.0", "OpenAI API client", "https://platform.openai.com/docs", _NPM),
    ),
    "OpenAI-python": (
        _pkg("openai", ">=1.58.0", "OpenAI API client", "https://platform.openai.com/docs", _PYPI),
    ),
    "Anthropic": (
        _pkg("@anthropic-ai/sdk", "^0.71.2", "Anthropic API client", "https://docs.anthropic.com", _NPM),
    ),
    "Anthropic-python": (
        _pkg("anthropic", ">=0.75.0", "Anthropic API client", "https://docs.anthropic.com", _PYPI),
    ),
    "Google AI (Gemini)": (
        _pkg("@google/genai", "^1.34.0", "Google Generative AI client", "https://ai.google.dev", _NPM),
    ),
    "Google AI (Gemini)-python": (
        _pkg(
            "google-generativeai",
            ">=0.8.6",
            "Google Generative AI client (deprecated - migrate to google-genai)",
            "https://ai.google.dev",
            _PYPI,
        ),
    ),
    "Ollama (Local)": (
        _pkg("ollama", ">=0.6.0", "Ollama local LLM client", "https://github.com/ollama/ollama-python", _PYPI),
    ),
    # Auth providers
    "Supabase Auth": (
        _pkg(
            "@supabase/supabase-js",
            "^2.89.0",
            "Supabase client with auth",
            "https://supabase.com/docs/reference/javascript/auth-api",
            _NPM,
        ),
    ),
    "Clerk": (
        _pkg("@clerk/nextjs", "^6.36.4", "Clerk auth for Next.js", "https://clerk.com/docs", _NPM),
    ),
    "Auth0": (
        _pkg("@auth0/nextjs-auth0", "^4.13.3", "Auth0 SDK for Next.js", "https://auth0.com/docs", _NPM),
    ),
    "NextAuth": (
        _pkg("next-auth", "^4.24.13", "Auth for Next.js", "https://next-auth.js.org", _NPM),
    ),
    # File storage
    "Supabase Storage": (
        _pkg(
            "@supabase/supabase-js",
            "^2.89.0",
            "Supabase client with storage",
            "https://supabase.com/docs/reference/javascript/storage-api",
            _NPM,
        ),
    ),
    "AWS S3": (
        _pkg("@aws-sdk/client-s3", "^3.730.0", "AWS S3 client", "https://docs.aws.amazon.com/AWSJavaScriptSDK/v3/latest/", _NPM),
    ),
    "Cloudflare R2": (
        _pkg("@aws-sdk/client-s3", "^3.730.0", "S3-compatible client for R2", "https://developers.cloudflare.com/r2/", _NPM),
    ),
    # Vector stores
    "pgvector": (
        _pkg("pgvector", ">=0.4.2", "PostgreSQL vector extension", "https://github.com/pgvector/pgvector-python", _PYPI),
    ),
    "Pinecone": (
        _pkg("pinecone", "^6.0.0", "Pinecone vector database client", "https://docs.pinecone.io", _PYPI),
    ),
    "Pinecone-npm": (
        _pkg(
            "@pinecone-database/pinecone",
            "^6.1.1",
            "Pinecone vector database client for Node.js",
            "https://docs.pinecone.io",
            _NPM,
        ),
    ),
    "Weaviate": (
        _pkg("weaviate-client", "^4.19.0", "Weaviate vector database client", "https://weaviate.io/developers/weaviate", _PYPI),
    ),
    "Qdrant": (
        _pkg("qdrant-client", "^1.16.2", "Qdrant vector database client", "https://qdrant.tech/documentation", _PYPI),
    ),
    "Qdrant-npm": (
        _pkg(
            "@qdrant/js-client-rest",
            "^1.16.2",
            "Qdrant vector database client for Node.js",
            "https://qdrant.tech/documentation",
            _NPM,
        ),
    ),
    # Background jobs
    "Inngest": (
        _pkg("inngest", "^3.48.0", "Background jobs and workflows", "https://www.inngest.com/docs", _NPM),
    ),
    "BullMQ": (
        _pkg("bullmq", "^5.66.1", "Redis-backed job queue", "https://docs.bullmq.io", _NPM),
    ),
    "Trigger.dev": (
        _pkg("@trigger.dev/sdk", "^4.0.4", "Background jobs platform", "https://trigger.dev/docs", _NPM),
    ),
    # External APIs
    "REST APIs": (
        _pkg("axios", "^1.7.0", "HTTP client", "https://axios-http.com", _NPM),
    ),
    "REST APIs-python": (
        _pkg("httpx", ">=0.28.0", "HTTP client for Python", "https://www.python-httpx.org", _PYPI),
    ),
    "GraphQL": (
        _pkg("@apollo/client", "^3.12.0", "GraphQL client", "https://www.apollographql.com/docs/react/", _NPM),
    ),
    "Webhooks": (
        _pkg("svix", "^1.58.0", "Webhook infrastructure", "https://docs.svix.com", _NPM),
    ),
    # ORM / utilities
    "prisma": (
        _pkg("prisma", "^7.2.0", "TypeScript ORM", "https://www.prisma.io/docs", _NPM),
    ),
    "drizzle": (
        _pkg("drizzle-orm", "^0.45.0", "TypeScript ORM", "https://orm.drizzle.team", _NPM),
    ),
    "sqlalchemy": (
        _pkg("sqlalchemy", ">=2.0.45", "Python ORM", "https://docs.sqlalchemy.org", _PYPI),
    ),
    "pydantic": (
        _pkg("pydantic", ">=2.12.0", "Data validation", "https://docs.pydantic.dev", _PYPI),
    ),
}

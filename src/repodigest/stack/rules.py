"""Knowledge base for stack detection.

Pure data: extension and manifest tables, per-ecosystem framework rules and
the directory-name vocabularies used for service roles. Adding a framework
or an ecosystem means adding rows here; the detector never changes.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from repodigest.config import MANIFEST_FILE_NAMES, MANIFEST_SUFFIXES

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".mts": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".py": "Python",
    ".go": "Go",
    ".rs": "Rust",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".scala": "Scala",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".fs": "F#",
    ".cpp": "C++",
    ".cc": "C++",
    ".hpp": "C++",
    ".c": "C",
    ".h": "C",
    ".swift": "Swift",
    ".dart": "Dart",
    ".ex": "Elixir",
    ".exs": "Elixir",
    ".hs": "Haskell",
    ".clj": "Clojure",
    ".cljs": "Clojure",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".astro": "Astro",
    ".lua": "Lua",
    ".sh": "Shell",
    ".sql": "SQL",
}

# Manifest file name -> ecosystem
MANIFEST_ECOSYSTEM: dict[str, str] = {
    "package.json": "node",
    "pom.xml": "jvm",
    "build.gradle": "jvm",
    "build.gradle.kts": "jvm",
    "go.mod": "go",
    "Cargo.toml": "rust",
    "pyproject.toml": "python",
    "requirements.txt": "python",
    "setup.py": "python",
    "Pipfile": "python",
    "Gemfile": "ruby",
    "composer.json": "php",
    "mix.exs": "elixir",
    "stack.yaml": "haskell",
    "project.clj": "clojure",
    "deps.edn": "clojure",
    "pubspec.yaml": "dart",
}

MANIFEST_SUFFIX_ECOSYSTEM: dict[str, str] = {
    ".csproj": "dotnet",
    ".fsproj": "dotnet",
    ".cabal": "haskell",
}

ECOSYSTEM_LANGUAGE: dict[str, str] = {
    "node": "JavaScript",
    "jvm": "Java",
    "go": "Go",
    "rust": "Rust",
    "python": "Python",
    "ruby": "Ruby",
    "php": "PHP",
    "dotnet": "C#",
    "elixir": "Elixir",
    "haskell": "Haskell",
    "clojure": "Clojure",
    "dart": "Dart",
}


def _npm(name: str) -> str:
    """Pattern for a package.json dependency key."""
    return r'"' + re.escape(name) + r'"\s*:'


# Ecosystem -> [(pattern, label)], matched case-insensitively against manifest text
FRAMEWORK_RULES: dict[str, list[tuple[str, str]]] = {
    "node": [
        (_npm("react"), "React"),
        (_npm("next"), "Next.js"),
        (_npm("vue"), "Vue"),
        (_npm("nuxt"), "Nuxt"),
        (_npm("@angular/core"), "Angular"),
        (_npm("svelte"), "Svelte"),
        (_npm("@sveltejs/kit"), "SvelteKit"),
        (_npm("solid-js"), "SolidJS"),
        (_npm("astro"), "Astro"),
        (r'"@remix-run/[a-z-]+"\s*:', "Remix"),
        (_npm("gatsby"), "Gatsby"),
        (_npm("react-native"), "React Native"),
        (_npm("expo"), "Expo"),
        (_npm("electron"), "Electron"),
        (_npm("express"), "Express"),
        (_npm("fastify"), "Fastify"),
        (_npm("koa"), "Koa"),
        (_npm("@nestjs/core"), "NestJS"),
        (_npm("@hapi/hapi"), "Hapi"),
        (_npm("hono"), "Hono"),
        (r'"(@prisma/client|prisma)"\s*:', "Prisma"),
        (_npm("typeorm"), "TypeORM"),
        (_npm("sequelize"), "Sequelize"),
        (_npm("mongoose"), "Mongoose"),
        (_npm("drizzle-orm"), "Drizzle"),
        (_npm("knex"), "Knex"),
        (_npm("pg"), "PostgreSQL"),
        (_npm("mysql2"), "MySQL"),
        (r'"(redis|ioredis)"\s*:', "Redis"),
        (_npm("graphql"), "GraphQL"),
        (r'"@apollo/(server|client)"\s*:', "Apollo"),
        (r'"@trpc/server"\s*:', "tRPC"),
        (r'"(redux|@reduxjs/toolkit)"\s*:', "Redux"),
        (_npm("zustand"), "Zustand"),
        (r'"(@tanstack/react-query|react-query)"\s*:', "React Query"),
        (_npm("tailwindcss"), "Tailwind CSS"),
        (_npm("vite"), "Vite"),
        (_npm("webpack"), "Webpack"),
        (_npm("jest"), "Jest"),
        (_npm("vitest"), "Vitest"),
        (_npm("mocha"), "Mocha"),
        (_npm("cypress"), "Cypress"),
        (r'"@playwright/test"\s*:', "Playwright"),
        (r'"@storybook/[a-z-]+"\s*:', "Storybook"),
        (_npm("socket.io"), "Socket.IO"),
        (r'"(bull|bullmq)"\s*:', "BullMQ"),
        (_npm("zod"), "Zod"),
        (_npm("typescript"), "TypeScript"),
        (_npm("turbo"), "Turborepo"),
        (_npm("nx"), "Nx"),
        (_npm("lerna"), "Lerna"),
    ],
    "jvm": [
        (r"spring-boot", "Spring Boot"),
        (r"spring-webflux", "Spring WebFlux"),
        (r"spring-security", "Spring Security"),
        (r"spring-data-jpa|jakarta\.persistence|javax\.persistence", "JPA"),
        (r"hibernate", "Hibernate"),
        (r"io\.quarkus", "Quarkus"),
        (r"io\.micronaut", "Micronaut"),
        (r"io\.ktor", "Ktor"),
        (r"io\.vertx", "Vert.x"),
        (r"flyway", "Flyway"),
        (r"liquibase", "Liquibase"),
        (r"kafka", "Kafka"),
        (r"postgresql", "PostgreSQL"),
        (r"mysql", "MySQL"),
        (r"junit", "JUnit"),
        (r"mockito", "Mockito"),
        (r"lombok", "Lombok"),
        (r"com\.android\.application|com\.android\.library", "Android"),
    ],
    "go": [
        (r"github\.com/gin-gonic/gin", "Gin"),
        (r"github\.com/labstack/echo", "Echo"),
        (r"github\.com/gofiber/fiber", "Fiber"),
        (r"github\.com/gorilla/mux", "Gorilla Mux"),
        (r"github\.com/go-chi/chi", "Chi"),
        (r"gorm\.io/gorm", "GORM"),
        (r"github\.com/jmoiron/sqlx", "sqlx"),
        (r"github\.com/jackc/pgx", "PostgreSQL"),
        (r"google\.golang\.org/grpc", "gRPC"),
        (r"github\.com/spf13/cobra", "Cobra"),
        (r"github\.com/stretchr/testify", "Testify"),
        (r"github\.com/redis/go-redis|github\.com/go-redis/redis", "Redis"),
    ],
    "rust": [
        (r"^\s*actix-web\s*=", "Actix Web"),
        (r"^\s*axum\s*=", "Axum"),
        (r"^\s*rocket\s*=", "Rocket"),
        (r"^\s*warp\s*=", "Warp"),
        (r"^\s*tokio\s*=", "Tokio"),
        (r"^\s*diesel\s*=", "Diesel"),
        (r"^\s*sqlx\s*=", "SQLx"),
        (r"^\s*sea-orm\s*=", "SeaORM"),
        (r"^\s*serde\s*=", "Serde"),
        (r"^\s*tonic\s*=", "gRPC"),
        (r"^\s*clap\s*=", "Clap"),
        (r"^\s*tauri\s*=", "Tauri"),
    ],
    "python": [
        (r"\bdjango\b", "Django"),
        (r"djangorestframework", "Django REST Framework"),
        (r"\bflask\b", "Flask"),
        (r"\bfastapi\b", "FastAPI"),
        (r"\bstarlette\b", "Starlette"),
        (r"\baiohttp\b", "aiohttp"),
        (r"\btornado\b", "Tornado"),
        (r"\bsqlalchemy\b", "SQLAlchemy"),
        (r"\balembic\b", "Alembic"),
        (r"psycopg", "PostgreSQL"),
        (r"\bcelery\b", "Celery"),
        (r"\bpydantic\b", "Pydantic"),
        (r"\bpytest\b", "pytest"),
        (r"\bpandas\b", "pandas"),
        (r"\bnumpy\b", "NumPy"),
        (r"\btorch\b", "PyTorch"),
        (r"\btensorflow\b", "TensorFlow"),
        (r"scikit-learn", "scikit-learn"),
        (r"\blangchain\b", "LangChain"),
        (r"\bclick\b", "Click"),
        (r"\btyper\b", "Typer"),
    ],
    "ruby": [
        (r"gem ['\"]rails['\"]", "Rails"),
        (r"gem ['\"]sinatra['\"]", "Sinatra"),
        (r"gem ['\"]hanami['\"]", "Hanami"),
        (r"gem ['\"]rspec", "RSpec"),
        (r"gem ['\"]sidekiq['\"]", "Sidekiq"),
        (r"gem ['\"]pg['\"]", "PostgreSQL"),
        (r"gem ['\"]devise['\"]", "Devise"),
    ],
    "php": [
        (r'"laravel/framework"', "Laravel"),
        (r'"symfony/[a-z-]+"', "Symfony"),
        (r'"slim/slim"', "Slim"),
        (r'"doctrine/orm"', "Doctrine"),
        (r'"phpunit/phpunit"', "PHPUnit"),
    ],
    "dotnet": [
        (r"Microsoft\.AspNetCore", "ASP.NET Core"),
        (r"Microsoft\.EntityFrameworkCore", "Entity Framework Core"),
        (r"Blazor", "Blazor"),
        (r"MediatR", "MediatR"),
        (r"\bxunit\b", "xUnit"),
        (r"\bNUnit\b", "NUnit"),
        (r"Npgsql", "PostgreSQL"),
    ],
    "elixir": [
        (r":phoenix\b", "Phoenix"),
        (r":phoenix_live_view\b", "Phoenix LiveView"),
        (r":ecto", "Ecto"),
        (r":absinthe\b", "Absinthe"),
        (r":oban\b", "Oban"),
        (r":postgrex\b", "PostgreSQL"),
    ],
    "haskell": [
        (r"\bservant\b", "Servant"),
        (r"\byesod\b", "Yesod"),
        (r"\bscotty\b", "Scotty"),
        (r"\bpersistent\b", "Persistent"),
        (r"\baeson\b", "Aeson"),
        (r"\bhspec\b", "Hspec"),
    ],
    "clojure": [
        (r"\bring/", "Ring"),
        (r"\bcompojure\b", "Compojure"),
        (r"\breitit\b", "Reitit"),
        (r"\bpedestal\b", "Pedestal"),
        (r"\bre-frame\b", "re-frame"),
        (r"next\.jdbc", "next.jdbc"),
    ],
    "dart": [
        (r"^\s*flutter\s*:", "Flutter"),
        (r"\bflutter_riverpod\b|\briverpod\b", "Riverpod"),
        (r"\bflutter_bloc\b", "BLoC"),
    ],
}

# Applied to every manifest regardless of ecosystem
OBSERVABILITY_RULES: list[tuple[str, str]] = [
    (r"opentelemetry", "OpenTelemetry"),
    (r"prometheus|prom-client", "Prometheus"),
    (r"sentry", "Sentry"),
    (r"datadog|dd-trace", "Datadog"),
    (r"newrelic", "New Relic"),
    (r"elastic-apm|elasticapm", "Elastic APM"),
]

# Infra/CI/cloud markers found by file name or path
INFRA_FILE_RULES: list[tuple[str, str]] = [
    (r"(^|/)Dockerfile(\.[\w-]+)?$", "Docker"),
    (r"(^|/)(docker-)?compose(\.[\w-]+)?\.ya?ml$", "Docker Compose"),
    (r"\.tf$", "Terraform"),
    (r"(^|/)Chart\.yaml$", "Helm"),
    (r"(^|/)(k8s|kubernetes)(/|\.ya?ml$)", "Kubernetes"),
    (r"(^|/)serverless\.ya?ml$", "Serverless Framework"),
    (r"(^|/)Jenkinsfile$", "Jenkins"),
    (r"(^|/)azure-pipelines\.ya?ml$", "Azure Pipelines"),
    (r"(^|/)bitbucket-pipelines\.yml$", "Bitbucket Pipelines"),
    (r"(^|/)cloudbuild\.ya?ml$", "Google Cloud Build"),
    (r"(^|/)(cdk\.json|template\.ya?ml|samconfig\.toml)$", "AWS"),
    (r"(^|/)fly\.toml$", "Fly.io"),
    (r"(^|/)vercel\.json$", "Vercel"),
    (r"(^|/)netlify\.toml$", "Netlify"),
    (r"(^|/)Procfile$", "Heroku"),
    (r"(^|/)ansible\.cfg$|(^|/)playbook\.ya?ml$", "Ansible"),
]

DATABASE_LABELS: frozenset[str] = frozenset({
    "Prisma", "TypeORM", "Sequelize", "Mongoose", "Drizzle", "Knex", "PostgreSQL",
    "MySQL", "Redis", "JPA", "Hibernate", "Flyway", "Liquibase", "GORM", "sqlx",
    "Diesel", "SQLx", "SeaORM", "SQLAlchemy", "Alembic", "Doctrine",
    "Entity Framework Core", "Ecto", "Persistent", "next.jdbc",
})

# Files whose mere presence marks a monorepo
MONOREPO_FILES: frozenset[str] = frozenset({
    "pnpm-workspace.yaml", "lerna.json", "nx.json", "turbo.json", "rush.json", "go.work",
})

# Manifest name -> pattern that marks a workspace root
MONOREPO_CONTENT_MARKERS: dict[str, str] = {
    "package.json": r'"workspaces"\s*:',
    "Cargo.toml": r"^\s*\[workspace\]",
    "pom.xml": r"<modules>",
}

# Directory names that never denote a service
SERVICE_DIR_BLACKLIST: frozenset[str] = frozenset({
    "test", "tests", "__tests__", "spec", "specs", "e2e", "testing", "fixtures",
    "mocks", "__mocks__", "example", "examples", "sample", "samples", "demo",
    "demos", "docs", "doc", "documentation", "scripts", "tools", "tooling",
    "vendor", "third_party", "third-party", "external", "node_modules",
    "dist", "build", "out", "target", "generated", "gen", "coverage",
    "public", "static", "assets", "resources", "templates", "migrations",
    "src", "main", "java", "kotlin", "com", "org", "net", "io", "internal",
    "pkg", "cmd", "bin", "obj", "lib64", "benchmarks", "bench",
})

LIBRARY_DIR_PATTERN = re.compile(
    r"^(lib|libs|shared|common|core|util|utils|sdk|types|typings|config|configs|"
    r"ui|ui-kit|design-system|components|models|proto|protos|contracts|eslint-config|"
    r"tsconfig)$|[-_](lib|sdk|utils|shared|common|types|core|config|client)$|^(lib|shared|common)[-_]"
)
MOBILE_DIR_PATTERN = re.compile(r"(^|[-_])(mobile|ios|android|expo|native|rn|flutter)($|[-_])")
FRONTEND_DIR_PATTERN = re.compile(
    r"(^|[-_])(web|frontend|front|client|dashboard|site|portal|admin|www|landing|app|spa|webapp)($|[-_])"
)
BACKEND_DIR_PATTERN = re.compile(
    r"(^|[-_])(api|server|backend|back|service|services|svc|worker|workers|gateway|"
    r"auth|bff|jobs?|functions|lambda)($|[-_])"
)
INFRA_DIR_PATTERN = re.compile(
    r"^(infra|infrastructure|deploy|deployment|deployments|terraform|k8s|kubernetes|"
    r"helm|charts|ops|devops|docker|ansible|ci)$"
)

# Default role per ecosystem when the directory name says nothing
ECOSYSTEM_DEFAULT_ROLE: dict[str, str] = {
    "node": "unknown",
    "jvm": "backend",
    "go": "backend",
    "rust": "backend",
    "python": "backend",
    "ruby": "backend",
    "php": "backend",
    "dotnet": "backend",
    "elixir": "backend",
    "haskell": "backend",
    "clojure": "backend",
    "dart": "mobile",
}

# Node manifests are refined by the frameworks they declare
NODE_MOBILE_LABELS: frozenset[str] = frozenset({"React Native", "Expo"})
NODE_FRONTEND_LABELS: frozenset[str] = frozenset({
    "React", "Next.js", "Vue", "Nuxt", "Angular", "Svelte", "SvelteKit",
    "SolidJS", "Astro", "Remix", "Gatsby",
})
NODE_BACKEND_LABELS: frozenset[str] = frozenset({
    "Express", "Fastify", "Koa", "NestJS", "Hapi", "Hono",
})


def manifest_ecosystem(path: str) -> str | None:
    """Ecosystem of a manifest file, or None if the file is not a manifest."""
    name = PurePosixPath(path).name
    if name in MANIFEST_ECOSYSTEM:
        return MANIFEST_ECOSYSTEM[name]
    suffix = PurePosixPath(name).suffix
    return MANIFEST_SUFFIX_ECOSYSTEM.get(suffix)


def is_manifest_file(path: str) -> bool:
    name = PurePosixPath(path).name
    return name in MANIFEST_FILE_NAMES or name.endswith(MANIFEST_SUFFIXES)


def _compile(rules: list[tuple[str, str]]) -> list[tuple[re.Pattern[str], str]]:
    return [(re.compile(p, re.IGNORECASE | re.MULTILINE), label) for p, label in rules]


COMPILED_FRAMEWORK_RULES: dict[str, list[tuple[re.Pattern[str], str]]] = {
    eco: _compile(rules) for eco, rules in FRAMEWORK_RULES.items()
}
COMPILED_OBSERVABILITY_RULES = _compile(OBSERVABILITY_RULES)
COMPILED_INFRA_FILE_RULES = [(re.compile(p), label) for p, label in INFRA_FILE_RULES]

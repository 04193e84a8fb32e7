"""Shared test fixtures for RepoDigest."""

from __future__ import annotations

from pathlib import Path

import pytest


def write(root: Path, rel_path: str, content: str) -> Path:
    """Write `content` to `root/rel_path`, creating parent directories."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


AUTH_SERVICE_HEADER = '''import { Injectable } from "@nestjs/common";
import { JwtService } from "@nestjs/jwt";
import { UsersRepository } from "./users.repository";

export interface AuthTokens {
  accessToken: string;
  refreshToken: string;
}

export type Role = "admin" | "member";

export class AuthService {
  constructor(private readonly jwt: JwtService, private readonly users: UsersRepository) {}

'''


def auth_service_source(methods: int = 12) -> str:
    """A TypeScript service well above the full-read threshold."""
    body = [AUTH_SERVICE_HEADER]
    for i in range(methods):
        body.append(
            f"  async login{i}(email: string, password: string): Promise<AuthTokens> {{\n"
            f"    const user = await this.users.findByEmail(email);\n"
            f"    if (!user || user.password !== password) {{\n"
            f"      throw new Error(\"invalid credentials for attempt {i} of the login flow\");\n"
            f"    }}\n"
            f"    const payload = {{ sub: user.id, role: user.role, attempt: {i} }};\n"
            f"    return {{ accessToken: this.jwt.sign(payload), refreshToken: this.jwt.sign(payload) }};\n"
            f"  }}\n\n"
        )
    body.append("}\n")
    return "".join(body)


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a small multi-service TypeScript monorepo."""
    root = tmp_path / "acme"
    root.mkdir()

    write(root, "package.json", '{\n  "name": "acme",\n  "private": true,\n  "workspaces": ["apps/*", "services/*", "packages/*"]\n}\n')
    write(root, "tsconfig.json", '{\n  "compilerOptions": { "strict": true }\n}\n')
    write(root, "Dockerfile", "FROM node:20-alpine\nCOPY . .\nRUN npm ci\n")
    write(root, ".env.example", "DATABASE_URL=postgres://localhost/acme\n")
    write(root, ".env", "SECRET=do-not-read\n")

    write(root, "docs/ARCHITECTURE.md", "# Architecture\n\nThe web app talks to the api service.\n")
    write(
        root,
        "db/migrations/2024_init.sql",
        "CREATE TABLE users (\n  id SERIAL PRIMARY KEY,\n  email TEXT NOT NULL UNIQUE\n);\n",
    )

    write(root, "apps/web/package.json", '{\n  "name": "web",\n  "dependencies": {\n    "react": "^18.2.0",\n    "next": "^14.0.0"\n  }\n}\n')
    write(
        root,
        "apps/web/src/index.tsx",
        'import React from "react";\nimport { createRoot } from "react-dom/client";\nimport App from "./App";\n\n'
        'createRoot(document.getElementById("root")!).render(<App />);\n',
    )
    write(
        root,
        "apps/web/src/App.tsx",
        'import React from "react";\n\nexport default function App() {\n  return <main>Hello</main>;\n}\n',
    )

    write(root, "services/api/package.json", '{\n  "name": "api",\n  "dependencies": {\n    "express": "^4.18.0",\n    "pg": "^8.11.0"\n  }\n}\n')
    write(root, "services/api/src/auth.service.ts", auth_service_source())
    write(
        root,
        "services/api/src/server.ts",
        'import express from "express";\n\nconst app = express();\n\n'
        'app.get("/health", (req, res) => {\n  res.json({ ok: true });\n});\n\napp.listen(3000);\n',
    )
    for i in range(5):
        write(
            root,
            f"services/api/src/__tests__/case{i}.spec.ts",
            f'describe("case {i}", () => {{\n  it("works", () => {{\n    expect({i}).toBe({i});\n  }});\n}});\n',
        )

    write(root, "packages/shared/package.json", '{\n  "name": "@acme/shared"\n}\n')
    write(root, "packages/shared/src/format.ts", "export const formatDate = (d: Date) => d.toISOString();\n")

    write(root, "node_modules/left-pad/index.js", "module.exports = () => {};\n")
    write(root, ".git/HEAD", "ref: refs/heads/main\n")

    return root


@pytest.fixture
def flat_project(tmp_path: Path) -> Path:
    """A single Go service with no nested manifests."""
    root = tmp_path / "billing"
    root.mkdir()
    write(root, "go.mod", "module example.com/billing\n\ngo 1.22\n\nrequire github.com/gin-gonic/gin v1.9.1\n")
    write(
        root,
        "main.go",
        'package main\n\nimport "github.com/gin-gonic/gin"\n\nfunc main() {\n\tr := gin.Default()\n\tr.Run()\n}\n',
    )
    write(root, "handler.go", "package main\n\nfunc health() string {\n\treturn \"ok\"\n}\n")
    return root


@pytest.fixture
def auth_service_ts() -> str:
    """TypeScript source for a P1 service above the full-read threshold."""
    return auth_service_source()

"""Tests for skeleton extraction."""

from __future__ import annotations

from repodigest.config import SkeletonConfig
from repodigest.skeleton.extractor import BODY_PLACEHOLDER, SKELETON_MARKER, is_skeleton, skeletonize
from repodigest.skeleton.profiles import C_FAMILY, TYPESCRIPT, profile_for


def _body(skeleton: str) -> list[str]:
    """Skeleton lines after the marker."""
    lines = skeleton.splitlines()
    assert lines[0] == SKELETON_MARKER
    return lines[1:]


class TestProfiles:
    def test_profile_for(self):
        assert profile_for(".ts") is TYPESCRIPT
        assert profile_for(".TSX") is TYPESCRIPT
        assert profile_for(".java") is C_FAMILY
        assert profile_for(".go") is C_FAMILY
        assert profile_for(".py") is None
        assert profile_for(".sql") is None


class TestPassthroughAndFallback:
    def test_sql_unchanged(self):
        sql = "CREATE TABLE users (\n  id SERIAL PRIMARY KEY\n);\n"
        assert skeletonize(sql, "db/migrations/2024_init.sql") == sql
        assert not is_skeleton(skeletonize(sql, "x.SQL"))

    def test_head_tail_fallback(self):
        source = "\n".join(f"line {i}" for i in range(40))
        body = _body(skeletonize(source, "tool.py"))
        assert body[:20] == [f"line {i}" for i in range(20)]
        assert body[20] == "... [15 lines elided] ..."
        assert body[21:] == [f"line {i}" for i in range(35, 40)]

    def test_short_file_kept(self):
        source = "\n".join(f"line {i}" for i in range(25))
        assert _body(skeletonize(source, "tool.rb")) == source.splitlines()

    def test_fallback_respects_config(self):
        source = "\n".join(f"line {i}" for i in range(12))
        config = SkeletonConfig(fallback_head_lines=2, fallback_tail_lines=1, fallback_min_lines=5)
        body = _body(skeletonize(source, "notes.txt", config))
        assert body == ["line 0", "line 1", "... [9 lines elided] ...", "line 11"]

    def test_marker_always_first(self):
        for path in ("a.ts", "a.java", "a.py", "Makefile"):
            assert is_skeleton(skeletonize("x = 1\n", path))


class TestTypeScriptSkeleton:
    def test_auth_service(self, auth_service_ts: str):
        source = auth_service_ts
        skeleton = skeletonize(source, "src/auth.service.ts")
        lines = _body(skeleton)

        assert 'import { Injectable } from "@nestjs/common";' in lines
        assert 'import { UsersRepository } from "./users.repository";' in lines
        assert "export interface AuthTokens {" in lines
        assert "  accessToken: string;" in lines
        assert "  refreshToken: string;" in lines
        assert 'export type Role = "admin" | "member";' in lines
        assert "export class AuthService {" in lines
        assert (
            "  constructor(private readonly jwt: JwtService, "
            "private readonly users: UsersRepository) {}"
        ) in lines
        assert (
            f"  async login0(email: string, password: string): Promise<AuthTokens> {BODY_PLACEHOLDER}"
        ) in lines
        assert "findByEmail" not in skeleton
        assert "throw" not in skeleton
        assert len(skeleton) < len(source)

    def test_import_cap(self):
        source = "\n".join(f'import a{i} from "a{i}";' for i in range(13))
        source += "\n\nexport const x = 1;\n"
        lines = _body(skeletonize(source, "index.ts"))
        assert lines[:10] == [f'import a{i} from "a{i}";' for i in range(10)]
        assert lines[10] == "// ... 3 more imports"
        assert lines[-1] == "export const x = 1;"

    def test_nested_interface_kept_verbatim(self):
        source = (
            "export interface Config {\n"
            "  db: {\n"
            "    url: string;\n"
            "  };\n"
            "}\n"
            "\n"
            "export function load(): Config {\n"
            "  return { db: { url: process.env.DB! } };\n"
            "}\n"
        )
        lines = _body(skeletonize(source, "config.ts"))
        assert lines[:5] == ["export interface Config {", "  db: {", "    url: string;", "  };", "}"]
        assert lines[-1] == f"export function load(): Config {BODY_PLACEHOLDER}"
        assert "process.env" not in "\n".join(lines)

    def test_braces_in_strings_ignored(self):
        source = (
            "export function a() {\n"
            '  const s = "{{";\n'
            "  return s;\n"
            "}\n"
            "export function b() {\n"
            "  return 1;\n"
            "}\n"
        )
        lines = _body(skeletonize(source, "strings.ts"))
        assert lines == [
            f"export function a() {BODY_PLACEHOLDER}",
            f"export function b() {BODY_PLACEHOLDER}",
        ]

    def test_comments_dropped(self):
        source = (
            "// leading comment\n"
            "/**\n"
            " * Docs for f.\n"
            " */\n"
            "export function f() {\n"
            "  return 1;\n"
            "}\n"
        )
        assert _body(skeletonize(source, "f.ts")) == [f"export function f() {BODY_PLACEHOLDER}"]

    def test_block_comment_before_closing_brace(self):
        source = (
            "export class A {\n"
            "  run() {\n"
            "    doIt();\n"
            "  /* done */ }\n"
            "  stop(): void {\n"
            "    halt();\n"
            "  }\n"
            "}\n"
            "export interface B { x: number }\n"
        )
        assert _body(skeletonize(source, "a.ts")) == [
            "export class A {",
            f"  run() {BODY_PLACEHOLDER}",
            f"  stop(): void {BODY_PLACEHOLDER}",
            "}",
            "export interface B { x: number }",
        ]


class TestCFamilySkeleton:
    def test_java_class(self):
        source = (
            "package com.acme;\n"
            "\n"
            "import java.util.List;\n"
            "\n"
            "@Service\n"
            "public class UserService {\n"
            "    private final UserRepository repo;\n"
            "\n"
            "    public List<User> findAll() {\n"
            "        return repo.findAll();\n"
            "    }\n"
            "}\n"
        )
        lines = _body(skeletonize(source, "UserService.java"))
        assert "package com.acme;" in lines
        assert "import java.util.List;" in lines
        assert "@Service" in lines
        assert "public class UserService {" in lines
        assert "    private final UserRepository repo;" in lines
        assert f"    public List<User> findAll() {BODY_PLACEHOLDER}" in lines
        assert lines[-1] == "}"
        assert "return repo.findAll();" not in "\n".join(lines)

    def test_java_interface_kept(self):
        source = (
            "public interface UserRepository {\n"
            "    List<User> findAll();\n"
            "    User findById(long id);\n"
            "}\n"
        )
        assert _body(skeletonize(source, "UserRepository.java")) == source.rstrip("\n").splitlines()

    def test_go_file(self):
        source = (
            "package main\n"
            "\n"
            "import (\n"
            '\t"fmt"\n'
            '\t"net/http"\n'
            ")\n"
            "\n"
            "type Server struct {\n"
            "\taddr string\n"
            "}\n"
            "\n"
            "type Store interface {\n"
            "\tGet(id string) (string, error)\n"
            "}\n"
            "\n"
            "func (s *Server) Start() error {\n"
            '\tfmt.Println("start")\n'
            "\treturn http.ListenAndServe(s.addr, nil)\n"
            "}\n"
        )
        lines = _body(skeletonize(source, "server.go"))
        assert lines[:6] == ["package main", "", "import (", '\t"fmt"', '\t"net/http"', ")"]
        assert "\taddr string" in lines
        assert "\tGet(id string) (string, error)" in lines
        assert lines[-1] == f"func (s *Server) Start() error {BODY_PLACEHOLDER}"
        assert "ListenAndServe" not in "\n".join(lines)

    def test_go_import_block_cap(self):
        inner = "".join(f'\t"pkg{i}"\n' for i in range(12))
        source = f"import (\n{inner})\n\nfunc main() {{\n}}\n"
        lines = _body(skeletonize(source, "main.go", SkeletonConfig(max_import_lines=3)))
        assert lines[:4] == ["import (", '\t"pkg0"', '\t"pkg1"', '\t"pkg2"']
        assert lines[4] == "// ... 9 more imports"
        assert lines[5] == ")"

    def test_csharp_braces_on_next_line(self):
        source = (
            "using System;\n"
            "\n"
            "namespace Acme.Billing\n"
            "{\n"
            "    public interface IInvoiceRepo\n"
            "    {\n"
            "        Invoice Find(int id);\n"
            "    }\n"
            "\n"
            "    public class InvoiceService\n"
            "    {\n"
            "        private readonly IInvoiceRepo _repo;\n"
            "\n"
            "        public Invoice Get(int id)\n"
            "        {\n"
            "            return _repo.Find(id);\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        assert _body(skeletonize(source, "InvoiceService.cs")) == [
            "using System;",
            "",
            "namespace Acme.Billing",
            "{",
            "    public interface IInvoiceRepo",
            "    {",
            "        Invoice Find(int id);",
            "    }",
            "",
            "    public class InvoiceService",
            "    {",
            "        private readonly IInvoiceRepo _repo;",
            "",
            "        public Invoice Get(int id)",
            f"        {BODY_PLACEHOLDER}",
            "    }",
            "}",
        ]

    def test_php_braces_on_next_line(self):
        source = (
            "<?php\n"
            "\n"
            "namespace App\\Http\\Controllers;\n"
            "\n"
            "use App\\Models\\User;\n"
            "\n"
            "class UserController extends Controller\n"
            "{\n"
            "    public function show(int $id): User\n"
            "    {\n"
            "        return User::findOrFail($id);\n"
            "    }\n"
            "\n"
            "    public function destroy(int $id): void\n"
            "    {\n"
            "        User::destroy($id);\n"
            "    }\n"
            "}\n"
        )
        lines = _body(skeletonize(source, "UserController.php"))
        assert lines == [
            "<?php",
            "",
            "namespace App\\Http\\Controllers;",
            "",
            "use App\\Models\\User;",
            "",
            "class UserController extends Controller",
            "{",
            "    public function show(int $id): User",
            f"    {BODY_PLACEHOLDER}",
            "",
            "    public function destroy(int $id): void",
            f"    {BODY_PLACEHOLDER}",
            "}",
        ]
        assert "findOrFail" not in "\n".join(lines)

    def test_pointer_line_is_code(self):
        source = (
            "void reset(Node *n) {\n"
            "    *n->count = 0; }\n"
            "void tick(void) {\n"
            "    step();\n"
            "}\n"
        )
        assert _body(skeletonize(source, "list.c")) == [
            f"void reset(Node *n) {BODY_PLACEHOLDER}",
            f"void tick(void) {BODY_PLACEHOLDER}",
        ]

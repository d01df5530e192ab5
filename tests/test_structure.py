from pathlib import Path

import pytest

from api_doc_agent.errors import ParseFailure
from api_doc_agent.parser.structure import analyze_structure

FIXTURES = Path(__file__).parent / "fixtures"


def _fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class TestImportsAndExports:
    def test_imports_in_source_order(self):
        facts = analyze_structure(_fixture("express_routes.ts"), "src/routes/users.ts")
        assert facts.imports == ["express", "../middleware/validate", "../db"]
        assert facts.dependencies == facts.imports

    def test_named_function_exports(self):
        facts = analyze_structure(_fixture("next_route.ts"), "src/app/api/users/route.ts")
        assert facts.exports == ["GET", "POST"]

    def test_default_and_const_exports_are_not_function_exports(self):
        source = "function main() { return 2; }\nexport const handler = () => 1;\nexport default main;\n"
        facts = analyze_structure(source)
        assert facts.exports == []
        assert [f.name for f in facts.functions] == ["main"]


class TestFunctions:
    def test_params_fall_back_to_unknown(self):
        facts = analyze_structure(_fixture("express_routes.ts"))
        fn = next(f for f in facts.functions if f.name == "formatUser")
        assert fn.params == ["user", "unknown", "unknown"]
        assert fn.is_async is False

    def test_async_functions(self):
        facts = analyze_structure(_fixture("next_route.ts"))
        assert [(f.name, f.params, f.is_async) for f in facts.functions] == [
            ("GET", ["request"], True),
            ("POST", ["request"], True),
        ]
        assert facts.is_async is True

    def test_rest_parameter_is_unknown(self):
        facts = analyze_structure("function log(prefix: string, ...args: string[]) {}\n")
        assert facts.functions[0].params == ["prefix", "unknown"]


class TestCapabilityFlags:
    def test_flags_default_false(self):
        facts = analyze_structure(_fixture("helpers.ts"))
        assert not any(facts.flags.model_dump().values())
        assert facts.is_async is False
        assert facts.event_driven is False

    def test_bare_callee_names_set_flags(self):
        source = (
            "requireAuth();\n"
            "validateInput(body);\n"
            "findMany();\n"
            "getCache('k');\n"
            "throttle(5);\n"
        )
        flags = analyze_structure(source).flags
        assert flags.authentication
        assert flags.validation
        assert flags.database
        assert flags.caching
        assert flags.rate_limit
        assert not flags.error_handling

    def test_member_calls_do_not_set_flags(self):
        facts = analyze_structure("db.query('x');\nauth.authenticate(user);\n")
        assert facts.flags.database is False
        assert facts.flags.authentication is False

    def test_local_function_named_validate_counts(self):
        source = "function validate(x: number) { return x > 0; }\nvalidate(3);\n"
        assert analyze_structure(source).flags.validation is True

    def test_try_catch_sets_error_handling(self):
        source = "try {\n  run();\n} catch (e) {\n  console.log(e);\n}\n"
        assert analyze_structure(source).flags.error_handling is True

    def test_no_try_no_error_handling(self):
        assert analyze_structure("run();\n").flags.error_handling is False

    def test_express_fixture_flags(self):
        flags = analyze_structure(_fixture("express_routes.ts")).flags
        assert flags.validation is True
        assert flags.error_handling is True
        assert flags.database is False

    def test_event_driven(self):
        assert analyze_structure("emitter.on('data', handle);\n").event_driven is True
        assert analyze_structure("window.addEventListener('load', init);\n").event_driven is True


class TestParseFailure:
    def test_syntax_error_raises(self):
        with pytest.raises(ParseFailure):
            analyze_structure(_fixture("broken.ts"), "src/api/broken.ts")

    def test_tsx_grammar_for_tsx_files(self):
        source = "function Page() {\n  return <div>hello</div>;\n}\n\nexport default Page;\n"
        facts = analyze_structure(source, "src/app/page.tsx")
        assert [f.name for f in facts.functions] == ["Page"]

    def test_jsx_in_plain_js_file(self):
        source = "export default function handler(req, res) {\n  return res.send(<div>ok</div>);\n}\n"
        facts = analyze_structure(source, "pages/api/hello.js")
        assert facts.exports == []

    def test_jsx_in_mjs_file(self):
        source = "function Hello(req, res) {\n  return res.send(<p>hi</p>);\n}\n\nexport default Hello;\n"
        facts = analyze_structure(source, "routes/hello.mjs")
        assert [(f.name, f.params) for f in facts.functions] == [("Hello", ["req", "res"])]

    def test_angle_bracket_cast_in_ts_file(self):
        source = "const raw: unknown = 1;\nconst n = <number>raw;\n"
        assert analyze_structure(source, "src/api/cast.ts").functions == []

"""End-to-end tests for the transform pipeline."""

import time

import pytest

from luadeob import TransformResult, build_pipeline, transform
from luadeob.config.models import DeobConfig, StagesConfig
from luadeob.stages import STAGE_NAMES


class TestTransform:
    def test_empty_input(self):
        result = transform("")
        assert result.text == ""
        assert result.techniques == []

    def test_no_long_whitespace_run_means_no_normalization(self):
        result = transform("local a = 1\nlocal b  = 2")
        assert "Whitespace normalization" not in result.techniques

    def test_long_whitespace_run_is_normalized(self):
        result = transform("x   =   1")
        assert result.text == "x = 1"
        assert result.techniques == ["Whitespace normalization"]

    def test_string_concatenation(self):
        result = transform('"Hello" .. "World"')
        assert '"HelloWorld"' in result.text
        assert "String concatenation simplification" in result.techniques

    def test_base64_literal(self):
        result = transform('local s = "SGVsbG8gV29ybGQ="')
        assert result.text == 'local s = "Hello World"'
        assert result.techniques == ["Base64 decoding"]

    def test_hex_escape(self):
        result = transform(r'print("\x41")')
        assert result.text == 'print("A")'
        assert "Hex string decoding" in result.techniques

    def test_repeated_long_identifier(self):
        result = transform("local abcdefghijk = 1\nprint(abcdefghijk)")
        assert result.text == "local var_4 = 1\nprint(var_4)"
        assert result.techniques.count("Variable name simplification") == 1

    def test_label_once_for_many_long_identifiers(self):
        result = transform("longVariableOne = longVariableTwo + longVariableThree")
        assert result.text == "var_1 = var_2 + var_3"
        assert result.techniques == ["Variable name simplification"]

    def test_long_function_name(self):
        source = "function reallyLongFunctionName(x)\nreturn x\nend\nprint(reallyLongFunctionName(1))"
        result = transform(source)
        assert result.text == "function func_1(x)\n  return x\nend\nprint(func_1(1))"
        assert "reallyLongFunctionName" not in result.text
        assert result.techniques == [
            "Variable name simplification",
            "Function name simplification",
            "Code formatting",
        ]

    def test_duplicate_labels_kept(self):
        result = transform(r'a = "SGVsbG8=" b = "V29ybGQ=" c = "\x41\x42"')
        assert result.text == 'a = "Hello" b = "World" c = "AB"'
        assert result.techniques == [
            "Base64 decoding",
            "Base64 decoding",
            "Hex string decoding",
            "Hex string decoding",
        ]

    def test_escapes_feed_formatting(self):
        result = transform(r"if x then\nprint(1)\nend")
        assert result.text == "if x then\n  print(1)\nend"
        assert result.techniques == ["Code formatting"]

    def test_sample_source(self, sample_source):
        result = transform(sample_source)
        assert 'local var_13 = "Hello World"' in result.text
        assert 'print(var_13..var_14("test"))' in result.text
        assert result.techniques == [
            "String concatenation simplification",
            "Variable name simplification",
            "Base64 decoding",
            "Code formatting",
        ]

    def test_second_run_leaves_renamed_text_alone(self):
        first = transform("local abcdefghijk = 1\nprint(abcdefghijk)")
        second = transform(first.text)
        assert second.text == first.text
        assert second.techniques == []

    def test_arbitrary_input_never_raises(self):
        for text in ["\x00\xff", "'", '"', "..", "\\x", "}}}}", "function (", "end end end"]:
            assert isinstance(transform(text), TransformResult)

    def test_large_input_stays_fast(self):
        lines = [f'local longVariableName{i} = "s{i}"' for i in range(5000)]
        start = time.perf_counter()
        result = transform("\n".join(lines))
        elapsed = time.perf_counter() - start
        # tokens per line: local, longVariableName<i>, s<i>
        assert 'local var_2 = "s0"' in result.text
        assert 'local var_14999 = "s4999"' in result.text
        assert result.techniques == ["Variable name simplification"]
        assert elapsed < 3.0


class TestBuildPipeline:
    def test_default_runs_every_stage_in_order(self):
        pipeline = build_pipeline()
        assert [s.name for s in pipeline.stages] == list(STAGE_NAMES)

    def test_skip_by_name(self):
        pipeline = build_pipeline(skip=["formatting", "base64"])
        names = [s.name for s in pipeline.stages]
        assert "formatting" not in names
        assert "base64" not in names
        assert len(names) == len(STAGE_NAMES) - 2

    def test_config_disables_stage(self):
        cfg = DeobConfig(stages=StagesConfig(base64=False))
        result = build_pipeline(cfg).run('local s = "SGVsbG8gV29ybGQ="')
        assert result.text == 'local s = "SGVsbG8gV29ybGQ="'
        assert result.techniques == []

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValueError, match="Unknown stage"):
            build_pipeline(skip=["nope"])

    def test_rename_config_applied(self):
        cfg = DeobConfig.model_validate({"rename": {"variable_prefix": "v"}})
        result = transform("local abcdefghijk = 1", cfg)
        assert result.text == "local v2 = 1"

    def test_on_stage_callback(self):
        seen: list[tuple[str, int]] = []
        build_pipeline().run('"SGVsbG8=" "V29ybGQ="', on_stage=lambda s, hits: seen.append((s.name, hits)))
        assert [name for name, _ in seen] == list(STAGE_NAMES)
        assert dict(seen)["base64"] == 2


class TestTransformResult:
    def test_technique_counts_keep_order(self):
        result = TransformResult(text="", techniques=["b", "a", "b"])
        assert list(result.technique_counts().items()) == [("b", 2), ("a", 1)]

    def test_fired(self):
        assert not TransformResult(text="x").fired
        assert TransformResult(text="x", techniques=["a"]).fired

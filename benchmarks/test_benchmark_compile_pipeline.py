"""Full compile pipeline benchmarks: resolve → tokenize → generate → finalize → exec.

Measures compile_template() for the full pipeline, then each stage on its
own for the medium template.

Run with: pytest benchmarks/test_benchmark_compile_pipeline.py --benchmark-only -v
"""

from __future__ import annotations

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from benchmarks.templates import DEFINES, LARGE, MEDIUM, MINIMAL, SMALL
from dottpl import Settings, compile_source, compile_template
from dottpl.compiler import CodeGenerator, finalize
from dottpl.instantiator import instantiate
from dottpl.lexer import tokenize
from dottpl.resolver import DefinitionResolver


@pytest.mark.benchmark(group="compile:pipeline")
@pytest.mark.parametrize(
    "text",
    [MINIMAL, SMALL, MEDIUM, LARGE, DEFINES],
    ids=["minimal", "small", "medium", "large", "defines"],
)
def test_compile(benchmark: BenchmarkFixture, text: str) -> None:
    """Full pipeline, text to callable."""
    render = benchmark(compile_template, text)
    assert callable(render)


@pytest.mark.benchmark(group="compile:pipeline:tstring")
def test_compile_tstring(benchmark: BenchmarkFixture) -> None:
    """Full pipeline with f-string output."""
    benchmark(compile_template, LARGE, {"tstring": True})


@pytest.mark.benchmark(group="compile:stages")
def test_stage_resolve(benchmark: BenchmarkFixture) -> None:
    settings = Settings()
    benchmark(lambda: DefinitionResolver(settings).resolve(DEFINES))


@pytest.mark.benchmark(group="compile:stages")
def test_stage_tokenize(benchmark: BenchmarkFixture) -> None:
    settings = Settings()
    tokens = benchmark(tokenize, MEDIUM, settings)
    assert tokens


@pytest.mark.benchmark(group="compile:stages")
def test_stage_generate(benchmark: BenchmarkFixture) -> None:
    settings = Settings()
    tokens = tokenize(MEDIUM, settings)
    benchmark(lambda: CodeGenerator(settings).generate(tokens))


@pytest.mark.benchmark(group="compile:stages")
def test_stage_finalize(benchmark: BenchmarkFixture) -> None:
    settings = Settings()
    statements = CodeGenerator(settings).generate(tokenize(MEDIUM, settings))
    benchmark(finalize, statements, settings)


@pytest.mark.benchmark(group="compile:stages")
def test_stage_instantiate(benchmark: BenchmarkFixture) -> None:
    settings = Settings()
    source = compile_source(MEDIUM)
    benchmark(instantiate, source, settings)

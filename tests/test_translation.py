import httpx
import pytest

from math_pipeline.backends.cas import CommandTranslator, HttpTranslator, TranslationError
from math_pipeline.config import TranslationConfig
from math_pipeline.translation import (
    ERROR_PREFIX,
    UNKNOWN_CAS,
    CASIdentifier,
    TranslationDispatcher,
    TranslatorRegistry,
)


def test_known_cas_is_dispatched(registry: TranslatorRegistry, translator_factory) -> None:
    maple = translator_factory("JacobiP(n, alpha, beta, x)")
    registry.register(CASIdentifier.MAPLE, maple)
    result = TranslationDispatcher(registry).translate("Maple", r"\JacobiP{\alpha}{\beta}{n}@{x}")
    assert result.output == "JacobiP(n, alpha, beta, x)"
    assert maple.seen == [r"\JacobiP{\alpha}{\beta}{n}@{x}"]


def test_cas_name_is_case_insensitive(registry: TranslatorRegistry, translator_factory) -> None:
    registry.register(CASIdentifier.MATHEMATICA, translator_factory("JacobiP[n, \\[Alpha], \\[Beta], x]"))
    result = TranslationDispatcher(registry).translate("mathematica", "x")
    assert result.output is not None


@pytest.mark.parametrize("cas", ["Reduce", "", None])
def test_unknown_cas(registry: TranslatorRegistry, translator_factory, cas) -> None:
    registry.register(CASIdentifier.MAPLE, translator_factory())
    result = TranslationDispatcher(registry).translate(cas, "x")
    assert result.output is None
    assert result.log == UNKNOWN_CAS


def test_translation_failure_is_reported(registry: TranslatorRegistry, translator_factory) -> None:
    registry.register(CASIdentifier.MAPLE, translator_factory(error=TranslationError("no rule for \\foo")))
    result = TranslationDispatcher(registry).translate("Maple", "\\foo")
    assert result.output is None
    assert result.log.startswith(ERROR_PREFIX)
    assert "TranslationError" in result.log
    assert "no rule for \\foo" in result.log


def test_failed_init_leaves_registry_empty(registry: TranslatorRegistry) -> None:
    registry.init(TranslationConfig(systems=("Maple",)))
    assert registry.initialized
    assert registry.available() == ()
    assert registry.failure
    result = TranslationDispatcher(registry).translate("Maple", "x")
    assert result.log == UNKNOWN_CAS


def test_registry_initializes_once(registry: TranslatorRegistry) -> None:
    registry.init(TranslationConfig(systems=("Maple",), command=("translator", "{cas}")))
    registry.init(TranslationConfig(systems=("Maple", "Mathematica"), command=("translator", "{cas}")))
    assert registry.available() == (CASIdentifier.MAPLE,)


def test_command_translator_substitutes_placeholders() -> None:
    translator = CommandTranslator(("translate", "--cas", "{cas}", "{latex}"), "Maple")
    args, stdin = translator.build_command(r"\sin x")
    assert args == ["translate", "--cas", "Maple", r"\sin x"]
    assert stdin is None


def test_command_translator_uses_stdin_without_latex_placeholder() -> None:
    args, stdin = CommandTranslator(("translate", "{cas}"), "Mathematica").build_command("x")
    assert args == ["translate", "Mathematica"]
    assert stdin == "x"


def test_http_translator() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert b"cas=Maple" in request.content
        return httpx.Response(200, json={"output": "sin(x)", "log": "done"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    result = HttpTranslator("http://translator.local", "Maple", client=client).translate(r"\sin@{x}")
    assert result.output == "sin(x)"
    assert result.log == "done"


def test_configured_system_names_are_case_insensitive(registry: TranslatorRegistry) -> None:
    registry.init(TranslationConfig(systems=("maple", "MATHEMATICA"), command=("translator", "{cas}")))
    assert registry.failure is None
    assert registry.available() == (CASIdentifier.MAPLE, CASIdentifier.MATHEMATICA)


def test_unknown_configured_system_fails_init(registry: TranslatorRegistry) -> None:
    registry.init(TranslationConfig(systems=("Reduce",), command=("translator", "{cas}")))
    assert registry.available() == ()
    assert "Reduce" in registry.failure

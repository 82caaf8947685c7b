import httpx
import pytest

from math_pipeline.backends.base import BackendError
from math_pipeline.backends.mathoid import MathoidClient
from math_pipeline.config import AppConfig
from math_pipeline.conversion import ConversionRouter
from math_pipeline.core import MATHOID_UNAVAILABLE, ConfigError, MathService
from math_pipeline.examples import ExampleNotFoundError
from math_pipeline.mathdoc import MathDoc

from test_enrichment import SUM


def _mathoid(handler) -> MathoidClient:
    return MathoidClient(client=httpx.Client(transport=httpx.MockTransport(handler)))


def build_service(registry, **kwargs) -> MathService:
    return MathService(AppConfig(), registry=registry, **kwargs)


def test_convert_latexml_post_processes(registry, backend_factory) -> None:
    remote = backend_factory()
    service = build_service(registry, router=ConversionRouter(local=backend_factory(), remote=remote))
    result = service.convert_latexml("a+b", raw_latex="a + b", origin="tester")
    assert MathDoc(result.markup).tex_annotation().text == "a + b"
    assert len(remote.calls) == 1


def test_convert_latexml_request_config_selects_local(registry, backend_factory) -> None:
    local, remote = backend_factory(), backend_factory()
    service = build_service(registry, router=ConversionRouter(local=local, remote=remote))
    service.convert_latexml("a+b", config_json='{"remote": false}')
    assert len(local.calls) == 1
    assert remote.calls == []


def test_convert_latexml_rejects_bad_config(registry, backend_factory) -> None:
    remote = backend_factory()
    service = build_service(registry, router=ConversionRouter(local=backend_factory(), remote=remote))
    with pytest.raises(ConfigError):
        service.convert_latexml("x", config_json='{"semanticMode": true}')
    assert remote.calls == []


def test_convert_latexml_backend_failure(registry, backend_factory) -> None:
    class ExplodingPostProcessor:
        def post_process(self, tex, result):
            raise AssertionError("post-processing must not run")

    remote = backend_factory(error=BackendError("TIMEOUT", "slow"))
    service = build_service(
        registry,
        router=ConversionRouter(local=backend_factory(), remote=remote),
        post_processor=ExplodingPostProcessor(),
    )
    with pytest.raises(BackendError):
        service.convert_latexml("x")


def test_mathoid_result_is_normalized(registry) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/mml"
        assert b"q=x%2B1" in request.content
        return httpx.Response(200, text=SUM)

    service = build_service(registry, mathoid=_mathoid(handler))
    output = service.convert_mathoid("x+1", "http://mathoid.local")
    assert MathDoc(output).content_tree() is not None


def test_mathoid_unreachable(registry) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = build_service(registry, mathoid=_mathoid(handler))
    assert service.convert_mathoid("x", "http://mathoid.local") == MATHOID_UNAVAILABLE + "http://mathoid.local"


def test_mathoid_uses_configured_url(registry) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    service = build_service(registry, mathoid=_mathoid(handler))
    assert service.convert_mathoid("x") == MATHOID_UNAVAILABLE + AppConfig().mathoid.url


def test_mathoid_other_failures_return_message(registry) -> None:
    service = build_service(registry, mathoid=_mathoid(lambda request: httpx.Response(400, text="bad tex")))
    message = service.convert_mathoid(r"\frac", "http://mathoid.local")
    assert "400" in message
    assert "bad tex" in message


def test_mathoid_plain_mathml_reports_missing_enrichment(registry) -> None:
    plain = '<math xmlns="http://www.w3.org/1998/Math/MathML"><mi>x</mi></math>'
    service = build_service(registry, mathoid=_mathoid(lambda request: httpx.Response(200, text=plain)))
    assert service.convert_mathoid("x", "http://mathoid.local") == "Markup carries no semantic enrichment"


def test_example_lookup(registry) -> None:
    service = build_service(registry)
    assert service.example().title == "Euler's identity"
    with pytest.raises(ExampleNotFoundError):
        service.example("../config")

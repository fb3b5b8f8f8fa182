"""
测试 HTTP 接口

覆盖：
- GET /metrics 端到端（假 du 脚本）
- du 失败时仍返回 200 与部分结果
- GET / 首页
"""

import pytest
from fastapi.testclient import TestClient

from du_exporter.app import build_registry, create_app
from du_exporter.config import ExporterConfig


@pytest.fixture
def config(make_du):
    binary = make_du(r"printf '10\t.\n5\t./sub\n'")
    return ExporterConfig(monitor=["."], du={"binary": binary, "timeout": 5})


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


def test_metrics_end_to_end(client: TestClient):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")

    body = resp.text
    assert "# TYPE file_size_folder_size_bytes gauge" in body
    assert 'file_size_folder_size_bytes{name="."} 10.0' in body
    assert 'file_size_folder_size_bytes{name="./sub"} 5.0' in body


def test_metrics_include_build_info(client: TestClient):
    body = client.get("/metrics").text
    assert 'file_size_build_info{' in body
    assert 'version="1.0.0"' in body


def test_failed_measurement_still_returns_200(make_du):
    binary = make_du("exit 1", name="broken-du")
    config = ExporterConfig(monitor=["/nope"], du={"binary": binary})
    client = TestClient(create_app(config))

    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "# TYPE file_size_folder_size_bytes gauge" in resp.text
    assert "file_size_folder_size_bytes{" not in resp.text


def test_partial_result_when_second_path_fails(make_du):
    binary = make_du(
        'if [ "$4" = "/bad" ]; then exit 1; fi\n'
        r"""printf '1\t%s\n' "$4" """,
        name="partial-du",
    )
    config = ExporterConfig(monitor=["/good", "/bad", "/after"], du={"binary": binary})
    body = TestClient(create_app(config)).get("/metrics").text

    assert 'file_size_folder_size_bytes{name="/good"} 1.0' in body
    assert 'name="/after"' not in body


def test_landing_page_links_metrics_path(make_du):
    config = ExporterConfig(metrics_path="/custom", du={"binary": make_du("true")})
    client = TestClient(create_app(config))

    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "<title>Disk Usage Exporter</title>" in resp.text
    assert "href='/custom'" in resp.text

    assert client.get("/custom").status_code == 200
    assert client.get("/metrics").status_code == 404


def test_custom_namespace(make_du):
    config = ExporterConfig(namespace="disk", du={"binary": make_du(r"printf '3\tx\n'")})
    body = TestClient(create_app(config)).get("/metrics").text

    assert 'disk_folder_size_bytes{name="x"} 3.0' in body
    assert "disk_build_info{" in body


def test_registries_are_independent(config):
    first = build_registry(config)
    second = build_registry(config)
    assert first is not second
    assert first.get_sample_value("file_size_folder_size_bytes", {"name": "./sub"}) == 5.0

"""Tests for TLS verify settings."""

from __future__ import annotations

import ssl

import pytest

from pbclient.client import Client
from pbclient.exceptions import ConfigError
from pbclient.models import SSLVerifyMode
from pbclient.transport.tls import build_verify, create_tls_context, parse_tls_version


class TestParseTlsVersion:
    @pytest.mark.parametrize("name", ["TLSv1_2", "TLSv1.2", "tlsv1_2", " TLSV1_2 "])
    def test_spellings(self, name: str) -> None:
        assert parse_tls_version(name) is ssl.TLSVersion.TLSv1_2

    def test_unknown_version(self) -> None:
        with pytest.raises(ConfigError, match="SSLv3"):
            parse_tls_version("SSLv3")


class TestBuildVerify:
    def test_verify_none_disables_checks(self) -> None:
        assert build_verify(SSLVerifyMode.NONE) is False

    def test_verify_none_ignores_version(self) -> None:
        assert build_verify(SSLVerifyMode.NONE, "TLSv1_3") is False

    def test_verify_peer_defaults_to_true(self) -> None:
        assert build_verify(SSLVerifyMode.PEER) is True

    def test_verify_peer_with_version_pins_context(self) -> None:
        context = build_verify(SSLVerifyMode.PEER, "TLSv1_3")
        assert isinstance(context, ssl.SSLContext)
        assert context.minimum_version is ssl.TLSVersion.TLSv1_3
        assert context.maximum_version is ssl.TLSVersion.TLSv1_3
        assert context.verify_mode == ssl.CERT_REQUIRED


class TestCreateTlsContext:
    def test_checks_hostnames(self) -> None:
        assert create_tls_context("TLSv1_2").check_hostname is True


class TestClientIntegration:
    def test_bad_ssl_version_fails_client_construction(self) -> None:
        with pytest.raises(ConfigError, match="ssl_version"):
            Client({"ssl_version": "SSLv3"})

    def test_verify_none_client_builds(self) -> None:
        with Client({"ssl_verify_mode": SSLVerifyMode.NONE}) as client:
            assert client.config.ssl_verify_mode is SSLVerifyMode.NONE

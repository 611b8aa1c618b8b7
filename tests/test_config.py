"""Tests for runtime configuration."""

import pytest

from vparecon.config import INSERT_ONLY, UPSERT_ON_KEY, ConflictPolicy, ReconConfig
from vparecon.domain.errors import ConfigurationError


class TestConflictPolicy:
    """Tests for ConflictPolicy."""

    def test_default_is_upsert_on_phone_vpa(self):
        policy = ConflictPolicy()
        assert policy.is_upsert
        assert policy.conflict_key == ("phone", "vpa")

    def test_insert_only(self):
        policy = ConflictPolicy.insert_only()
        assert policy.mode == INSERT_ONLY
        assert not policy.is_upsert

    def test_upsert_on_id(self):
        assert ConflictPolicy.upsert_on_key("id").conflict_key == ("id",)

    def test_unenforced_key_rejected(self):
        with pytest.raises(ConfigurationError):
            ConflictPolicy.upsert_on_key("vpa")

    def test_unknown_mode_rejected(self):
        with pytest.raises(ConfigurationError):
            ConflictPolicy(mode="merge")

    def test_parse_upsert_alias(self):
        policy = ConflictPolicy.parse("Upsert")
        assert policy.mode == UPSERT_ON_KEY
        assert policy.conflict_key == ("phone", "vpa")

    def test_parse_key_list(self):
        assert ConflictPolicy.parse("upsert_on_key", " ID ").conflict_key == ("id",)

    def test_parse_insert_only(self):
        assert ConflictPolicy.parse("insert_only", "id") == ConflictPolicy.insert_only()


class TestReconConfig:
    """Tests for ReconConfig."""

    def test_defaults(self):
        config = ReconConfig()
        assert config.max_import_batch_size == 1000
        assert config.max_import_records == 3000
        assert config.max_delete_batch_size == 1000
        assert config.privileged_store is True

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ConfigurationError):
            ReconConfig(max_delete_batch_size=value)

    def test_from_env(self):
        config = ReconConfig.from_env(
            {
                "VPARECON_MAX_IMPORT_BATCH_SIZE": "250",
                "VPARECON_MATCHING_CHUNK_SIZE": "10",
                "VPARECON_CONFLICT_POLICY": "insert_only",
                "VPARECON_PRIVILEGED_STORE": "no",
            }
        )
        assert config.max_import_batch_size == 250
        assert config.matching_chunk_size == 10
        assert config.max_import_records == 3000
        assert config.conflict_policy.mode == INSERT_ONLY
        assert config.privileged_store is False

    def test_from_env_empty(self):
        assert ReconConfig.from_env({}) == ReconConfig()

    def test_from_env_bad_integer(self):
        with pytest.raises(ConfigurationError) as excinfo:
            ReconConfig.from_env({"VPARECON_STORE_PAGE_SIZE": "lots"})
        assert "VPARECON_STORE_PAGE_SIZE" in str(excinfo.value)

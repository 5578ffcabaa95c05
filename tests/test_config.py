"""Tests for YAML configuration loading."""

import yaml

from shapesnap.config import EngineConfig, load_config, save_default_config


class TestConfig:
    """Tests for configuration defaults and merging."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "absent.yaml"))

        assert config == EngineConfig()
        assert load_config(None) == EngineConfig()

    def test_partial_override(self, tmp_path):
        """Only the keys present in the file change."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "gate": {"min_points": 20},
            "materialize": {"circle_samples": 64},
            "default_sensitivity": 70,
        }))

        config = load_config(str(path))

        assert config.gate.min_points == 20
        assert config.gate.min_diagonal == 12.0
        assert config.materialize.circle_samples == 64
        assert config.materialize.parabola_samples == 140
        assert config.default_sensitivity == 70

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"gate": {"bogus": 1}, "nonsense": {"a": 2}}))

        config = load_config(str(path))

        assert not hasattr(config.gate, "bogus")
        assert config == EngineConfig()

    def test_empty_sections_keep_defaults(self, tmp_path):
        """Sections with every key commented out load as None and are skipped."""
        path = tmp_path / "config.yaml"
        path.write_text("gate:\n  # min_points: 12\ntracing:\n")

        config = load_config(str(path))

        assert config.gate.min_points == 10
        assert config.tracing.enabled is False
        assert config == EngineConfig()

    def test_scalar_section_ignored(self, tmp_path):
        """A scalar where a section belongs never replaces the section."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"gate": 5, "materialize": [1, 2], "default_sensitivity": 65}))

        config = load_config(str(path))

        assert config.gate.min_points == 10
        assert config.materialize.circle_samples == 120
        assert config.default_sensitivity == 65

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(str(path)) == EngineConfig()

    def test_saved_defaults_round_trip(self, tmp_path):
        path = tmp_path / "defaults.yaml"

        save_default_config(str(path))

        data = yaml.safe_load(path.read_text())
        assert data["gate"]["min_points"] == 10
        assert data["simplify"]["min_dist_floor"] == 1.5
        assert load_config(str(path)) == EngineConfig()

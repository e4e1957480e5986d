"""Test configuration loading"""

import yaml

from mp3inspect.config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Test Settings sources and validation"""

    def test_defaults(self):
        """Test built-in defaults"""
        settings = Settings()

        assert settings.id3.strict_version is False
        assert settings.id3.frame_size_mode == "synchsafe"
        assert settings.id3.encoding_policy == "regional_legacy"
        assert settings.id3.legacy_encoding == "gb18030"
        assert settings.scan.enabled is True
        assert settings.output.format == "text"
        assert settings.get_errors() == []

    def test_yaml_file(self, temp_dir):
        """Test values from an explicit config file"""
        path = temp_dir / "custom.yaml"
        path.write_text(yaml.dump({
            'id3': {'frame_size_mode': 'big_endian', 'unknown_key': 1},
            'output': {'format': 'yaml'},
            'unknown_section': {'x': 1},
        }))

        settings = Settings(str(path))

        assert settings.id3.frame_size_mode == "big_endian"
        assert settings.output.format == "yaml"
        assert not hasattr(settings.id3, 'unknown_key')

    def test_file_in_working_directory(self, temp_dir):
        """Test config.yaml is picked up from the working directory"""
        (temp_dir / "config.yaml").write_text("id3:\n  legacy_encoding: cp1251\n")

        assert Settings().id3.legacy_encoding == "cp1251"

    def test_user_config_directory(self, temp_dir):
        """Test ~/.mp3inspect/config.yaml is read"""
        config_dir = temp_dir / ".mp3inspect"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("scan:\n  enabled: false\n")

        assert Settings().scan.enabled is False

    def test_environment_overrides(self, monkeypatch, temp_dir):
        """Test environment variables win over the config file"""
        (temp_dir / "config.yaml").write_text("id3:\n  legacy_encoding: cp1251\n")
        monkeypatch.setenv('MP3INSPECT_LEGACY_ENCODING', 'big5')
        monkeypatch.setenv('MP3INSPECT_STRICT_VERSION', 'yes')
        monkeypatch.setenv('MP3INSPECT_FRAME_SIZE_MODE', 'big_endian')

        settings = Settings()

        assert settings.id3.legacy_encoding == "big5"
        assert settings.id3.strict_version is True
        assert settings.id3.frame_size_mode == "big_endian"

    def test_validation_errors(self):
        """Test invalid values are reported"""
        settings = Settings()
        settings.id3.frame_size_mode = "octal"
        settings.id3.legacy_encoding = "no-such-codec"
        settings.logging.level = "LOUD"

        errors = settings.get_errors()

        assert len(errors) == 3

    def test_save_and_reload(self, temp_dir):
        """Test saved configuration loads back"""
        settings = Settings()
        settings.id3.encoding_policy = "strict"
        target = settings.save_config(str(temp_dir / "saved" / "config.yaml"))

        assert target.exists()
        assert Settings(str(target)).id3.encoding_policy == "strict"

    def test_save_to_user_directory(self, temp_dir):
        """Test the default save location"""
        target = Settings().save_config()
        assert target == temp_dir / ".mp3inspect" / "config.yaml"

    def test_reload_replaces_global(self):
        """Test reload_settings swaps the shared instance"""
        before = get_settings()
        after = reload_settings()

        assert after is not before
        assert get_settings() is after

    def test_to_dict(self):
        """Test the sections view"""
        data = Settings().to_dict()
        assert list(data) == ['id3', 'scan', 'output', 'logging']
        assert data['id3']['legacy_encoding'] == "gb18030"

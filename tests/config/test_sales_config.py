"""
Tests for the sales configuration layer.

Covers:
- YAML parsing into frozen SalesConfig
- Validation failures (non-boolean flags, duplicate stores, missing ids)
- Bundled default configuration
- StoreTaxDisplayConfig as a TaxDisplayConfig port
- SALES_CONFIG_TRACE audit log
"""

import textwrap

import pytest
import yaml

from sales_config import SalesConfig, StoreTaxDisplayConfig, get_active_config
from sales_config.loader import compute_checksum, parse_sales_config
from sales_modules.documents.ports import TaxDisplayConfig


def _write(tmp_path, text: str):
    path = tmp_path / "sales.yaml"
    path.write_text(textwrap.dedent(text))
    return path


@pytest.fixture
def config_file(tmp_path):
    return _write(tmp_path, """
        default:
          shipping_includes_tax: false
        stores:
          - store_id: eu
            shipping_includes_tax: true
          - store_id: 7
    """)


class TestParsing:

    def test_stores_parsed(self, config_file):
        config = get_active_config(config_file)

        assert isinstance(config, SalesConfig)
        assert config.default_shipping_includes_tax is False
        assert config.for_store("eu").shipping_includes_tax is True
        assert config.for_store(7).shipping_includes_tax is False
        assert config.for_store("us") is None

    def test_empty_document_uses_defaults(self):
        config = parse_sales_config({})
        assert config.default_shipping_includes_tax is False
        assert config.stores == ()

    def test_empty_file(self, tmp_path):
        config = get_active_config(_write(tmp_path, ""))
        assert config.stores == ()

    def test_checksum_is_stable(self):
        data = {"stores": [{"store_id": "a"}], "default": {"shipping_includes_tax": True}}
        reordered = {"default": {"shipping_includes_tax": True}, "stores": [{"store_id": "a"}]}
        assert compute_checksum(data) == compute_checksum(reordered)
        assert parse_sales_config(data).checksum == compute_checksum(data)

    def test_config_is_frozen(self, config_file):
        config = get_active_config(config_file)
        with pytest.raises(AttributeError):
            config.default_shipping_includes_tax = True


class TestValidation:

    def test_non_boolean_flag_rejected(self):
        with pytest.raises(ValueError, match="shipping_includes_tax"):
            parse_sales_config({"default": {"shipping_includes_tax": "yes please"}})

    def test_non_boolean_store_flag_rejected(self):
        with pytest.raises(ValueError):
            parse_sales_config({"stores": [{"store_id": "a", "shipping_includes_tax": 1}]})

    def test_duplicate_store_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            parse_sales_config({"stores": [{"store_id": "a"}, {"store_id": "a"}]})

    def test_missing_store_id(self):
        with pytest.raises(KeyError):
            parse_sales_config({"stores": [{"shipping_includes_tax": True}]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            get_active_config(_write(tmp_path, "stores: [unclosed"))


class TestBundledDefault:

    def test_default_loads(self):
        config = get_active_config()
        assert config.default_shipping_includes_tax is False
        assert config.checksum

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "SALES_CONFIG_TRACE"]
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["config_path"].endswith("default.yaml")
        assert traces[0]["store_count"] == 0


class TestStoreTaxDisplayConfig:

    def test_satisfies_port(self, config_file):
        assert isinstance(StoreTaxDisplayConfig(get_active_config(config_file)), TaxDisplayConfig)

    def test_store_setting(self, config_file):
        tax = StoreTaxDisplayConfig(get_active_config(config_file))
        assert tax.displays_shipping_tax_inclusive("eu") is True
        assert tax.displays_shipping_tax_inclusive(7) is False

    def test_unknown_store_falls_back_to_default(self, tmp_path, captured_logs):
        path = _write(tmp_path, """
            default:
              shipping_includes_tax: true
        """)
        tax = StoreTaxDisplayConfig(get_active_config(path))

        assert tax.displays_shipping_tax_inclusive("nowhere") is True
        assert tax.displays_shipping_tax_inclusive(None) is True
        fallbacks = [r for r in captured_logs() if r["message"] == "tax_display_store_default"]
        assert fallbacks[0]["store_id"] == "nowhere"

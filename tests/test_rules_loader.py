"""RulesLoaderのテスト。"""

import json
import tempfile
from pathlib import Path

import pytest

from pcp_report.grouping.rule_set import RuleConfigError
from pcp_report.io.rules_loader import RulesFileError, RulesLoader, default_rules_path


GROUPS = {
    "$schema": "./groups.schema.json",
    "security": {
        "id": "security",
        "title": "Security",
        "children": {
            "escaping": {
                "id": "escaping",
                "title": "Escaping",
                "type": "prefix",
                "checks": ["WordPress.Security.EscapeOutput"],
                "parent": "security",
            },
            "nonce": {
                "id": "nonce",
                "title": "Nonce",
                "type": "prefix",
                "checks": ["WordPress.Security.NonceVerification"],
            },
        },
    },
    "i18n": {
        "id": "i18n",
        "title": "Internationalization",
        "type": "contains",
        "checks": ["I18n"],
    },
}


def _write(directory, name, content):
    path = Path(directory) / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestRulesLoaderLoad:
    """ファイル読み込みのテスト。"""

    def test_load_json(self):
        """JSONファイルの読み込みのテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "groups.json", json.dumps(GROUPS))
            rule_set = RulesLoader().load(path)

            assert rule_set.ids == ["security", "escaping", "nonce", "i18n"]
            assert rule_set["escaping"].parent_id == "security"
            # parentを省略した子は外側のグループが親になる
            assert rule_set["nonce"].parent_id == "security"
            assert rule_set["security"].is_container
            assert [r.id for r in rule_set.top_level()] == ["security", "i18n"]

    def test_load_yaml(self):
        """YAMLファイルの読み込みのテスト。"""
        content = (
            "database:\n"
            "  id: database\n"
            "  title: Database\n"
            "  type: prefix\n"
            "  checks:\n"
            "    - WordPress.DB\n"
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "groups.yaml", content)
            rule_set = RulesLoader().load(path)

            assert rule_set.ids == ["database"]
            assert rule_set["database"].patterns == ("WordPress.DB",)

    def test_load_default_rules(self):
        """同梱のデフォルト設定が読み込めることのテスト。"""
        rule_set = RulesLoader().load()
        assert len(rule_set) > 0
        assert "security" in rule_set
        assert Path(default_rules_path()).exists()

    def test_file_not_found(self):
        """ファイルが存在しない場合のテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(RulesFileError, match="File not found"):
                RulesLoader().load(str(Path(tmpdir) / "missing.json"))

    def test_invalid_json(self):
        """JSONとして不正な場合のテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "groups.json", "{not json")
            with pytest.raises(RulesFileError, match="Decode error"):
                RulesLoader().load(path)

    def test_rules_file_error_is_rule_config_error(self):
        """RulesFileErrorがRuleConfigErrorとして捕捉できることのテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(RuleConfigError):
                RulesLoader().load(str(Path(tmpdir) / "missing.json"))


class TestRulesLoaderValidation:
    """スキーマ検証のテスト。"""

    def test_schema_key_is_ignored(self):
        """$schemaキーが無視されることのテスト。"""
        groups = RulesLoader().validate(GROUPS)
        assert list(groups) == ["security", "i18n"]

    def test_top_level_must_be_object(self):
        """トップレベルが配列の場合のテスト。"""
        with pytest.raises(RulesFileError):
            RulesLoader().validate([])

    def test_type_without_checks(self):
        """typeがあってchecksがない場合のテスト。"""
        data = {"a": {"id": "a", "title": "A", "type": "prefix"}}
        with pytest.raises(RulesFileError, match="JSON validation failed"):
            RulesLoader().validate(data)

    def test_checks_without_type(self):
        """checksがあってtypeがない場合のテスト。"""
        data = {"a": {"id": "a", "title": "A", "checks": ["X"]}}
        with pytest.raises(RulesFileError):
            RulesLoader().validate(data)

    def test_unknown_match_type(self):
        """未知の照合方式の場合のテスト。"""
        data = {"a": {"id": "a", "title": "A", "type": "regex", "checks": ["X"]}}
        with pytest.raises(RulesFileError, match='Property "a.type"'):
            RulesLoader().validate(data)

    def test_missing_title(self):
        """titleがない場合のテスト。"""
        with pytest.raises(RulesFileError, match='Property "a.title"'):
            RulesLoader().validate({"a": {"id": "a"}})

    def test_key_must_match_id(self):
        """キーとidが一致しない場合のテスト。"""
        data = {"a": {"id": "b", "title": "A"}}
        with pytest.raises(RulesFileError, match="does not match its key"):
            RulesLoader().validate(data)

    def test_nested_children_are_rejected(self):
        """子グループがさらに子を持つ場合のテスト。"""
        data = {
            "a": {
                "id": "a",
                "title": "A",
                "children": {
                    "b": {
                        "id": "b",
                        "title": "B",
                        "children": {"c": {"id": "c", "title": "C"}},
                    },
                },
            },
        }
        with pytest.raises(RulesFileError):
            RulesLoader().validate(data)

    def test_unknown_parent(self):
        """存在しない親を参照する場合のテスト。"""
        data = {"a": {"id": "a", "title": "A", "type": "prefix", "checks": ["X"], "parent": "nope"}}
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "groups.json", json.dumps(data))
            with pytest.raises(RulesFileError, match="Invalid group configuration file"):
                RulesLoader().load(path)


class TestRulesLoaderFlatten:
    """平坦化のテスト。"""

    def test_flatten_order_and_records(self):
        """グループの直後に子が並ぶことのテスト。"""
        records = RulesLoader().flatten(RulesLoader().validate(GROUPS))
        assert [r["id"] for r in records] == ["security", "escaping", "nonce", "i18n"]
        assert records[0] == {"id": "security", "title": "Security"}
        assert records[2]["parent"] == "security"
        assert records[3] == {
            "id": "i18n",
            "title": "Internationalization",
            "type": "contains",
            "checks": ["I18n"],
        }

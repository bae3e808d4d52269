"""Tests for the YAML-backed template library."""

from pathlib import Path

import pytest
import yaml

from lexform.errors import TemplateNotFoundError, TemplateValidationError
from lexform.templating.library import (
    STATUS_INACTIVE,
    DocumentTemplate,
    TemplateLibrary,
)


class TestDocumentTemplate:
    """Tests for the DocumentTemplate data class."""

    def test_placeholders_derived_from_content(self) -> None:
        template = DocumentTemplate("t", "misc", "{{b}} {{a}} {{b}}")
        assert template.placeholders == ["b", "a"]

    def test_placeholders_follow_content_changes(self) -> None:
        template = DocumentTemplate("t", "misc", "{{a}}")
        template.content = "{{x}} {{y}}"
        assert template.placeholders == ["x", "y"]

    def test_to_dict_uses_token_form(self) -> None:
        data = DocumentTemplate("t", "misc", "Dear {{name}}").to_dict()
        assert data["placeholders"] == ["{{name}}"]
        assert data["name"] == "t"
        assert data["status"] == "active"


class TestTemplateLibrary:
    """Tests for loading, querying and editing the library."""

    def test_load_missing_file(self) -> None:
        library = TemplateLibrary(Path("/nonexistent/templates.yaml"))
        assert len(library) == 0

    def test_load_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert len(TemplateLibrary(path)) == 0

    def test_load_templates(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        assert len(library) == 2
        affidavit = library.get("affidavit")
        assert affidavit.category == "affidavit"
        assert affidavit.placeholders == ["name", "address", "date"]
        assert affidavit.required_documents == ["Aadhaar card"]

    def test_stale_placeholders_in_file_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "deed": {
                        "category": "property",
                        "content": "{{seller}} to {{buyer}}",
                        "placeholders": ["{{old_field}}"],
                    }
                }
            )
        )
        assert TemplateLibrary(path).get("deed").placeholders == ["seller", "buyer"]

    def test_unknown_keys_ignored(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text(
            "notice:\n"
            "  category: legal\n"
            "  content: To {{name}}\n"
            "  created_at: 2024-01-01\n"
            "  author_id: 7\n",
            encoding="utf-8",
        )
        with caplog.at_level("WARNING"):
            library = TemplateLibrary(path)

        assert library.get("notice").placeholders == ["name"]
        assert "author_id, created_at" in caplog.text

    def test_non_mapping_file_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text("- affidavit\n- notice\n", encoding="utf-8")
        with pytest.raises(TemplateValidationError, match="must map template names"):
            TemplateLibrary(path)

    def test_non_mapping_entry_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text("affidavit: just some text\n", encoding="utf-8")
        with pytest.raises(TemplateValidationError, match="'affidavit'"):
            TemplateLibrary(path)

    def test_entry_missing_content_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text("affidavit:\n  category: affidavit\n", encoding="utf-8")
        with pytest.raises(TemplateValidationError, match="missing: content"):
            TemplateLibrary(path)

    def test_list_active_only(self, templates_file: Path) -> None:
        names = [t.name for t in TemplateLibrary(templates_file).list_templates()]
        assert names == ["affidavit"]

    def test_list_including_inactive(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        names = {t.name for t in library.list_templates(include_inactive=True)}
        assert names == {"affidavit", "old_notice"}

    def test_get_missing(self, templates_file: Path) -> None:
        with pytest.raises(TemplateNotFoundError):
            TemplateLibrary(templates_file).get("missing")

    def test_contains(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        assert "affidavit" in library
        assert "missing" not in library

    def test_add(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        library.add(DocumentTemplate("will", "succession", "I, {{name}}"))
        assert library.get("will").placeholders == ["name"]

    def test_add_duplicate(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        with pytest.raises(TemplateValidationError):
            library.add(DocumentTemplate("affidavit", "affidavit", "x"))

    @pytest.mark.parametrize("attr", ["name", "category", "content"])
    def test_add_missing_required(self, attr: str) -> None:
        values = {"name": "n", "category": "c", "content": "x"}
        values[attr] = ""
        with pytest.raises(TemplateValidationError, match=attr):
            TemplateLibrary(Path("/nonexistent.yaml")).add(DocumentTemplate(**values))

    def test_update_recomputes_placeholders(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        updated = library.update("affidavit", content="Signed by {{signatory}}")
        assert updated.placeholders == ["signatory"]
        assert library.get("affidavit").placeholders == ["signatory"]

    def test_update_status(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        library.update("affidavit", status=STATUS_INACTIVE)
        assert library.list_templates() == []

    def test_update_rejects_rename(self, templates_file: Path) -> None:
        with pytest.raises(TemplateValidationError):
            TemplateLibrary(templates_file).update("affidavit", name="other")

    def test_update_rejects_empty_content(self, templates_file: Path) -> None:
        with pytest.raises(TemplateValidationError):
            TemplateLibrary(templates_file).update("affidavit", content="")

    def test_update_missing(self, templates_file: Path) -> None:
        with pytest.raises(TemplateNotFoundError):
            TemplateLibrary(templates_file).update("missing", content="x")

    def test_remove(self, templates_file: Path) -> None:
        library = TemplateLibrary(templates_file)
        library.remove("affidavit")
        assert "affidavit" not in library

    def test_remove_missing(self, templates_file: Path) -> None:
        with pytest.raises(TemplateNotFoundError):
            TemplateLibrary(templates_file).remove("missing")

    def test_save_round_trip(self, templates_file: Path, tmp_path: Path) -> None:
        library = TemplateLibrary(templates_file)
        library.add(DocumentTemplate("will", "succession", "I, {{name}}"))
        out = library.save(tmp_path / "out" / "saved.yaml")

        reloaded = TemplateLibrary(out)
        assert len(reloaded) == 3
        assert reloaded.get("will").content == "I, {{name}}"
        assert "placeholders" not in yaml.safe_load(out.read_text())["will"]

    def test_save_non_ascii_template(self, tmp_path: Path) -> None:
        library = TemplateLibrary(tmp_path / "templates.yaml")
        library.add(
            DocumentTemplate("शपथपत्र", "affidavit", "मैं {{name}}", language="hindi")
        )
        reloaded = TemplateLibrary(library.save())
        assert reloaded.get("शपथपत्र").placeholders == ["name"]

    def test_shipped_templates_load(self, project_root: Path) -> None:
        library = TemplateLibrary(project_root / "configs" / "templates.yaml")
        assert "affidavit" in library
        assert "case_number" in library.get("vakalatnama").placeholders

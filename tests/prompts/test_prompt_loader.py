import pytest
from jinja2 import UndefinedError

from hrchat.pipeline.roles import HR, STANDARD
from hrchat.prompts.loader import PromptLoader


def test_prompt_loader_strips_front_matter():
    loader = PromptLoader()
    content = loader.load("system/policy_assistant.md")
    assert not content.startswith("---")
    assert "{{ organization_name }}" in content


def test_prompt_loader_reads_metadata():
    loader = PromptLoader()
    metadata = loader.get_metadata("agents/response_formatter.md")
    assert metadata["name"] == "response_formatter"
    assert "rows_json" in metadata["variables"]


def test_prompt_loader_renders_template():
    loader = PromptLoader()
    rendered = loader.render("system/policy_assistant.md", organization_name="Acme")
    assert rendered == "You are an HR assistant for Acme. Answer based on the provided handbook content."


def test_prompt_loader_missing_variable_raises():
    loader = PromptLoader()
    with pytest.raises(UndefinedError):
        loader.render("system/policy_assistant.md")


def test_prompt_loader_missing_file():
    loader = PromptLoader()
    with pytest.raises(FileNotFoundError):
        loader.render("system/missing.md")
    with pytest.raises(FileNotFoundError):
        loader.load("system/missing.md")


def test_sql_assistant_standard_block():
    loader = PromptLoader()
    rendered = loader.render(
        "system/sql_assistant.md",
        schema_text="TABLE: dice_staff",
        full_access=False,
        hr_id=None,
        examples=STANDARD.examples,
    )
    assert rendered.startswith("TABLE: dice_staff")
    assert "FULL ACCESS" not in rendered
    assert 'User: "List them"  [referring to previous query]' in rendered
    assert rendered.endswith("⚠️ CRITICAL: For database queries, return ONLY the JSON!")


def test_sql_assistant_hr_block():
    loader = PromptLoader()
    rendered = loader.render(
        "system/sql_assistant.md",
        schema_text="TABLE: dice_staff",
        full_access=True,
        hr_id=None,
        examples=HR.examples,
    )
    assert "HR ID: not provided" in rendered
    assert "(but no access restrictions)" in rendered
    assert 'User: "All pending leave requests"' in rendered


def test_custom_prompts_dir(tmp_path):
    (tmp_path / "greeting.md").write_text("---\nname: greeting\n---\nHello {{ name }}!\n")
    loader = PromptLoader(tmp_path)
    assert loader.render("greeting.md", name="Priya") == "Hello Priya!"
    assert loader.get_metadata("greeting.md") == {"name": "greeting"}

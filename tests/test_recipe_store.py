"""
Tests for recipe directory loading.
"""

from pathlib import Path

import pytest

from recipebump.core.errors import LoadError
from recipebump.core.services.recipe_store import load_recipes, read_text, recipe_path
from tests.helpers import simple_recipe, write_recipe


class TestLoadRecipes:
    """Tests for load_recipes."""

    def test_sorted_by_file_name(self, recipes_dir: Path):
        write_recipe(recipes_dir, "zeta", simple_recipe("zeta"))
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"))
        write_recipe(recipes_dir, "mid", simple_recipe("mid"), suffix=".yml")
        names = [s.name for s in load_recipes(recipes_dir)]
        assert names == ["alpha", "mid", "zeta"]

    def test_paths_recorded(self, recipes_dir: Path):
        path = write_recipe(recipes_dir, "alpha", simple_recipe("alpha"))
        [stored] = load_recipes(recipes_dir)
        assert stored.path == path
        assert stored.recipe.version == "1.0.0"

    def test_ignores_other_files(self, recipes_dir: Path):
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"))
        (recipes_dir / "README.md").write_text("# recipes\n")
        (recipes_dir / ".hidden.yaml").write_text("not: a recipe\n")
        (recipes_dir / "sub.yaml").mkdir()
        assert [s.name for s in load_recipes(recipes_dir)] == ["alpha"]

    def test_empty_directory(self, recipes_dir: Path):
        assert load_recipes(recipes_dir) == []

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(LoadError, match="not found"):
            load_recipes(tmp_path / "missing")

    def test_one_bad_file_fails_the_batch(self, recipes_dir: Path):
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"))
        write_recipe(recipes_dir, "broken", "name: [\n")
        with pytest.raises(LoadError, match="broken.yaml"):
            load_recipes(recipes_dir)

    def test_name_must_match_file(self, recipes_dir: Path):
        write_recipe(recipes_dir, "alpha", simple_recipe("beta"))
        with pytest.raises(LoadError, match="does not match"):
            load_recipes(recipes_dir)

    def test_duplicate_recipe(self, recipes_dir: Path):
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"))
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"), suffix=".yml")
        with pytest.raises(LoadError, match="also defined"):
            load_recipes(recipes_dir)

    def test_not_utf8(self, recipes_dir: Path):
        (recipes_dir / "alpha.yaml").write_bytes(b"name: \xff\xfe\n")
        with pytest.raises(LoadError, match="cannot read"):
            load_recipes(recipes_dir)


class TestHelpers:
    """Tests for path and text helpers."""

    def test_read_text_keeps_crlf(self, tmp_path: Path):
        path = tmp_path / "x.yaml"
        path.write_bytes(b"a: 1\r\nb: 2\r\n")
        assert read_text(path) == "a: 1\r\nb: 2\r\n"

    def test_recipe_path_prefers_existing(self, recipes_dir: Path):
        write_recipe(recipes_dir, "alpha", simple_recipe("alpha"), suffix=".yml")
        assert recipe_path(recipes_dir, "alpha") == recipes_dir / "alpha.yml"
        assert recipe_path(recipes_dir, "beta") == recipes_dir / "beta.yaml"

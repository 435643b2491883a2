"""Tests for pack manifest resolution and legacy migration."""

import json

from app.manifest_resolver import (
    CurrentManifest,
    LegacyManifest,
    ManifestResolver,
    list_packs,
    read_raw_manifest,
)
from app.types import PackManifest, PackNotFound, SoundEntry
from tests.conftest import write_pack
from utils.constants import Category


class TestResolve:
    def test_current_schema(self, packs_dir, peon_pack):
        manifest = ManifestResolver(packs_dir).resolve("peon")

        assert isinstance(manifest, PackManifest)
        assert manifest.schema == "openpeon.json"
        assert manifest.display_name == "Peon"
        assert manifest.sounds_for(Category.TASK_ERROR) == (
            SoundEntry("sounds/oops.wav", "line oops.wav"),
        )

    def test_missing_pack(self, packs_dir):
        outcome = ManifestResolver(packs_dir).resolve("ghost")

        assert isinstance(outcome, PackNotFound)
        assert outcome.pack_name == "ghost"

    def test_directory_without_manifest(self, packs_dir):
        (packs_dir / "empty").mkdir()
        assert isinstance(ManifestResolver(packs_dir).resolve("empty"), PackNotFound)

    def test_path_like_pack_name_rejected(self, packs_dir, peon_pack):
        resolver = ManifestResolver(packs_dir / "sub")
        assert isinstance(resolver.resolve("../packs/peon"), PackNotFound)
        assert isinstance(resolver.resolve(".."), PackNotFound)

    def test_current_preferred_over_legacy(self, packs_dir):
        write_pack(packs_dir, "both", {"greeting": ["old.wav"]}, legacy=True)
        write_pack(packs_dir, "both", {"session.start": ["new.wav"]})

        manifest = ManifestResolver(packs_dir).resolve("both")

        assert manifest.schema == "openpeon.json"
        assert manifest.sounds_for(Category.SESSION_START)[0].file_id == "sounds/new.wav"

    def test_corrupt_current_falls_back_to_legacy(self, packs_dir):
        pack_dir = write_pack(packs_dir, "p", {"complete": ["a.wav"]}, legacy=True)
        (pack_dir / "openpeon.json").write_text("{broken")

        manifest = ManifestResolver(packs_dir).resolve("p")

        assert manifest.schema == "manifest.json"
        assert manifest.sounds_for(Category.TASK_COMPLETE)

    def test_result_is_cached(self, packs_dir, peon_pack):
        resolver = ManifestResolver(packs_dir)
        first = resolver.resolve("peon")

        (peon_pack / "openpeon.json").write_text(json.dumps({"categories": {}}))

        assert resolver.resolve("peon") is first

    def test_not_found_is_not_cached(self, packs_dir):
        resolver = ManifestResolver(packs_dir)
        assert isinstance(resolver.resolve("late"), PackNotFound)

        write_pack(packs_dir, "late", {"task.complete": ["x.wav"]})

        assert isinstance(resolver.resolve("late"), PackManifest)


class TestNormalization:
    def test_legacy_and_current_normalize_identically(self, packs_dir):
        write_pack(
            packs_dir,
            "old",
            {
                "greeting": ["hi.wav", "yo.wav"],
                "complete": ["done.wav"],
                "permission": ["what.wav"],
                "annoyed": ["stop.wav"],
                "resource_limit": ["full.wav"],
                "acknowledge": ["ok.wav"],
                "error": ["err.wav"],
            },
            legacy=True,
        )
        write_pack(
            packs_dir,
            "new",
            {
                "session.start": ["hi.wav", "yo.wav"],
                "task.complete": ["done.wav"],
                "input.required": ["what.wav"],
                "user.spam": ["stop.wav"],
                "resource.limit": ["full.wav"],
                "task.acknowledge": ["ok.wav"],
                "task.error": ["err.wav"],
            },
        )
        resolver = ManifestResolver(packs_dir)

        old = resolver.resolve("old")
        new = resolver.resolve("new")

        assert old.schema == "manifest.json"
        assert dict(old.categories) == dict(new.categories)
        assert set(old.categories) == set(Category)

    def test_unmapped_legacy_keys_dropped(self, packs_dir):
        write_pack(
            packs_dir, "p", {"complete": ["a.wav"], "victory": ["b.wav"]}, legacy=True
        )

        manifest = ManifestResolver(packs_dir).resolve("p")

        assert list(manifest.categories) == [Category.TASK_COMPLETE]

    def test_legacy_names_not_accepted_in_current_schema(self, packs_dir):
        write_pack(packs_dir, "p", {"complete": ["a.wav"], "task.error": ["b.wav"]})

        manifest = ManifestResolver(packs_dir).resolve("p")

        assert list(manifest.categories) == [Category.TASK_ERROR]

    def test_empty_category_same_as_absent(self, packs_dir):
        write_pack(packs_dir, "p", {"task.complete": [], "task.error": ["e.wav"]})

        manifest = ManifestResolver(packs_dir).resolve("p")

        assert Category.TASK_COMPLETE not in manifest.categories
        assert manifest.sounds_for(Category.TASK_COMPLETE) == ()

    def test_entries_without_file_skipped(self, packs_dir):
        pack_dir = packs_dir / "p"
        pack_dir.mkdir()
        (pack_dir / "openpeon.json").write_text(
            json.dumps(
                {
                    "categories": {
                        "task.error": {
                            "sounds": [{"label": "nothing"}, "junk", {"file": "sounds/e.wav"}]
                        }
                    }
                }
            )
        )

        manifest = ManifestResolver(packs_dir).resolve("p")

        assert manifest.sounds_for(Category.TASK_ERROR) == (SoundEntry("sounds/e.wav", ""),)
        assert manifest.name == "p"

    def test_legacy_subdirectory_refs_stay_under_sounds(self, packs_dir):
        pack_dir = packs_dir / "old"
        (pack_dir / "sounds" / "peasant").mkdir(parents=True)
        (pack_dir / "sounds" / "peasant" / "ready.wav").write_bytes(b"RIFF")
        (pack_dir / "manifest.json").write_text(
            json.dumps(
                {
                    "categories": {
                        "greeting": {"sounds": [{"file": "peasant\\ready.wav"}]}
                    }
                }
            )
        )

        manifest = ManifestResolver(packs_dir).resolve("old")
        entry = manifest.sounds_for(Category.SESSION_START)[0]

        assert entry.file_id == "sounds/peasant/ready.wav"
        assert manifest.sound_path(entry) == (
            pack_dir / "sounds" / "peasant" / "ready.wav"
        ).resolve()

    def test_read_raw_manifest_tags_variant(self, packs_dir):
        legacy_dir = write_pack(packs_dir, "l", {"greeting": ["a.wav"]}, legacy=True)
        current_dir = write_pack(packs_dir, "c", {"session.start": ["a.wav"]})

        assert isinstance(read_raw_manifest(legacy_dir), LegacyManifest)
        assert isinstance(read_raw_manifest(current_dir), CurrentManifest)
        assert read_raw_manifest(packs_dir) is None


class TestSoundPath:
    def test_resolves_inside_pack(self, packs_dir, peon_pack):
        manifest = ManifestResolver(packs_dir).resolve("peon")
        entry = manifest.sounds_for(Category.TASK_ERROR)[0]

        assert manifest.sound_path(entry) == (peon_pack / "sounds" / "oops.wav").resolve()

    def test_escape_rejected(self, packs_dir, peon_pack):
        manifest = ManifestResolver(packs_dir).resolve("peon")
        assert manifest.sound_path(SoundEntry("../../etc/passwd")) is None


class TestListPacks:
    def test_lists_both_schemas_sorted(self, packs_dir):
        write_pack(packs_dir, "zeta", {"session.start": ["a.wav"]})
        write_pack(packs_dir, "alpha", {"greeting": ["a.wav"]}, legacy=True)
        (packs_dir / "nomanifest").mkdir()

        assert list_packs(packs_dir) == ["alpha", "zeta"]

    def test_missing_dir(self, tmp_path):
        assert list_packs(tmp_path / "missing") == []

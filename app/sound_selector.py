# Anti-repeat sound selection within a category

import random
from typing import Optional

from app.types import PackManifest, PeonState, SoundEntry
from utils.constants import Category


def pick_sound(
    manifest: PackManifest,
    category: Category,
    state: PeonState,
    rng: random.Random = None,
) -> Optional[SoundEntry]:
    """
    Pick a random sound from a category, avoiding the last played file.

    With two or more distinct files the same file is never returned twice in
    a row. The choice is written to state.last_played; persisting it is up to
    the caller.

    Args:
        manifest: Normalized pack manifest
        category: Category to pick from
        state: Persisted state, mutated in place
        rng: Random source (module-level random by default)

    Returns:
        SoundEntry or None if the category has no sounds
    """
    sounds = manifest.sounds_for(category)
    if not sounds:
        return None

    candidates = list(sounds)
    if len(sounds) > 1:
        last_file = state.last_played.get(category.value)
        filtered = [s for s in sounds if s.file_id != last_file]
        # Every entry shares the last file id: nothing to exclude
        if filtered:
            candidates = filtered

    pick = (rng or random).choice(candidates)
    state.last_played[category.value] = pick.file_id
    return pick

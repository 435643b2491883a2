# Session -> pack assignment with sticky random rotation

import random

from app.config_resolver import PeonConfig
from app.types import PeonState
from utils.colored_logger import setup_logger

logger = setup_logger(__name__)


def resolve_active_pack(
    peon_config: PeonConfig,
    state: PeonState,
    session_id: str,
    rng: random.Random = None,
) -> str:
    """
    Resolve the pack a session plays from.

    Without a rotation list this is always config.active_pack and state is
    not touched. With one, the session keeps the pack it was first given as
    long as that pack is still listed; otherwise a new pack is drawn and
    recorded in state.session_packs.

    Args:
        peon_config: User configuration
        state: Persisted state, mutated when a pack is (re)assigned
        session_id: Current session identifier
        rng: Random source (module-level random by default)

    Returns:
        str: Pack name
    """
    rotation = peon_config.pack_rotation
    if not rotation:
        return peon_config.active_pack

    existing = state.session_packs.get(session_id)
    if existing and existing in rotation:
        return existing

    pick = (rng or random).choice(rotation)
    state.session_packs[session_id] = pick
    if existing:
        logger.info(
            f"Session {session_id}: pack '{existing}' left the rotation, reassigned to '{pick}'"
        )
    else:
        logger.info(f"Session {session_id}: assigned pack '{pick}' from rotation")
    return pick

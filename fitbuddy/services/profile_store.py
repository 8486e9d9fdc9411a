from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from fitbuddy.errors import AuthorizationError, InputValidationError, StoreError
from fitbuddy.models.profile import UserProfile
from .document_store import DocumentStore, get_document_store, profile_path

logger = logging.getLogger(__name__)


def parse_profile(data: Mapping[str, Any]) -> UserProfile:
    try:
        return UserProfile.model_validate(dict(data))
    except ValidationError as e:
        raise InputValidationError(f"Invalid profile: {e.errors()[0]['msg']}") from e


class ProfileStore:
    """One profile document per user at users/{userId}."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def save(self, user_id: Optional[str], profile: UserProfile | Mapping[str, Any]) -> UserProfile:
        if not user_id:
            raise AuthorizationError("User must be logged in to save profile.")
        if not isinstance(profile, UserProfile):
            profile = parse_profile(profile)
        logger.info("Saving profile for user %s", user_id)
        self.store.set(profile_path(user_id), profile.to_document())
        return profile

    def load(self, user_id: Optional[str]) -> Optional[UserProfile]:
        # Signed-out callers observe "no profile"
        if not user_id:
            return None
        data = self.store.get(profile_path(user_id))
        if data is None:
            logger.debug("No profile found for user %s", user_id)
            return None
        try:
            return UserProfile.model_validate(data)
        except ValidationError as e:
            raise StoreError(f"Stored profile for {user_id} is malformed: {e}") from e


def get_profile_store() -> ProfileStore:
    return ProfileStore(get_document_store())

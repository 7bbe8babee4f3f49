"""
Async key-value persistence for one user's data on this device.

Every call works on a single key: list-valued keys (history, favorites,
outfits) are updated by loading the whole list, changing it in memory and
saving it back, so concurrent writers to the same key race and the last one
wins. Failures are logged and reported as ``{"success": False, "error": ...}``
(or ``None`` for reads); nothing raises out of this class.
"""
import asyncio
import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping
import structlog

from ..config import settings
from .storage import StorageBackend


logger = structlog.get_logger("sizefit")

SCAN_IMAGE_TYPES = ("front", "side", "back")

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "measurement_unit": "cm",
    "currency": "USD",
    "notifications": True,
    "dark_mode": False,
    "language": "en",
    "privacy_mode": True,
}

FREE_SUBSCRIPTION: Dict[str, Any] = {
    "plan": "free",
    "expires_at": None,
    "features": ["basic_avatar", "basic_recommendations"],
}

PREMIUM_PLANS = {"student", "pro"}

# Expected shape of each section accepted by import_all_data
IMPORT_SECTIONS: Dict[str, type] = {
    "profile": Mapping,
    "measurements": Mapping,
    "avatar": Mapping,
    "history": list,
    "favorites": list,
    "outfits": list,
    "preferences": Mapping,
    "subscription": Mapping,
}


def _now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def _new_id() -> str:
    return str(int(time.time() * 1000))


class StorageManager:
    def __init__(self, backend: StorageBackend, namespace: str | None = None, history_limit: int | None = None) -> None:
        self.backend = backend
        self.namespace = namespace if namespace is not None else settings.storage_namespace
        self.history_limit = history_limit if history_limit is not None else settings.history_limit

    def _key(self, key: str) -> str:
        return self.namespace + key

    # Core key-value operations

    async def save(self, key: str, data: Any) -> Dict[str, Any]:
        try:
            await self.backend.set_item(self._key(key), json.dumps(data))
            return {"success": True}
        except Exception as e:
            logger.error("storage_save_error", key=key, error=str(e))
            return {"success": False, "error": str(e)}

    async def load(self, key: str) -> Any:
        try:
            raw = await self.backend.get_item(self._key(key))
            return json.loads(raw) if raw else None
        except Exception as e:
            logger.error("storage_load_error", key=key, error=str(e))
            return None

    async def delete(self, key: str) -> Dict[str, Any]:
        try:
            await self.backend.remove_item(self._key(key))
            return {"success": True}
        except Exception as e:
            logger.error("storage_delete_error", key=key, error=str(e))
            return {"success": False, "error": str(e)}

    async def clear_all(self) -> Dict[str, Any]:
        try:
            keys = [k for k in await self.backend.keys() if k.startswith(self.namespace)]
            for k in keys:
                await self.backend.remove_item(k)
            logger.info("storage_cleared", removed=len(keys))
            return {"success": True}
        except Exception as e:
            logger.error("storage_clear_error", error=str(e))
            return {"success": False, "error": str(e)}

    # User profile

    async def save_user_profile(self, profile: Mapping[str, Any]) -> Dict[str, Any]:
        now = _now()
        data = {
            "name": profile.get("name"),
            "email": profile.get("email"),
            "created_at": profile.get("created_at") or now,
            "updated_at": now,
        }
        return await self.save("user_profile", data)

    async def get_user_profile(self) -> Dict[str, Any] | None:
        return await self.load("user_profile")

    async def update_user_profile(self, updates: Mapping[str, Any]) -> Dict[str, Any]:
        current = await self.get_user_profile() or {}
        updated = {**current, **updates, "updated_at": _now()}
        return await self.save("user_profile", updated)

    # Measurements

    async def save_measurements(self, measurements: Mapping[str, Any]) -> Dict[str, Any]:
        data = {
            "chest": measurements.get("chest"),
            "waist": measurements.get("waist"),
            "hips": measurements.get("hips"),
            "height": measurements.get("height"),
            "weight": measurements.get("weight") or None,
            "inseam": measurements.get("inseam") or None,
            "shoulders": measurements.get("shoulders") or None,
            "sleeve_length": measurements.get("sleeve_length") or None,
            "unit": measurements.get("unit") or "cm",
            "saved_at": _now(),
        }
        return await self.save("measurements", data)

    async def get_measurements(self) -> Dict[str, Any] | None:
        return await self.load("measurements")

    async def update_measurement(self, field: str, value: Any) -> Dict[str, Any]:
        current = await self.get_measurements() or {}
        current[field] = value
        current["saved_at"] = _now()
        return await self.save("measurements", current)

    # Avatar and body scan captures

    async def save_avatar_data(self, avatar: Mapping[str, Any]) -> Dict[str, Any]:
        data = {
            "mesh_data": avatar.get("mesh_data"),
            "skin_tone": avatar.get("skin_tone") or "default",
            "hair_style": avatar.get("hair_style") or "default",
            "body_type": avatar.get("body_type"),
            "generated_at": _now(),
        }
        return await self.save("avatar", data)

    async def get_avatar_data(self) -> Dict[str, Any] | None:
        return await self.load("avatar")

    async def save_scan_image(self, image_type: str, image_data: str) -> Dict[str, Any]:
        if image_type not in SCAN_IMAGE_TYPES:
            return {"success": False, "error": f"Unknown scan image type: {image_type}"}
        return await self.save(f"scan_{image_type}", {"image_data": image_data, "captured_at": _now()})

    async def get_scan_image(self, image_type: str) -> Dict[str, Any] | None:
        return await self.load(f"scan_{image_type}")

    async def get_all_scan_images(self) -> Dict[str, Any]:
        images = await asyncio.gather(*(self.get_scan_image(t) for t in SCAN_IMAGE_TYPES))
        return dict(zip(SCAN_IMAGE_TYPES, images))

    # Size recommendation history

    async def save_size_recommendation(self, brand: str, product_type: str, recommendation: Mapping[str, Any]) -> Dict[str, Any]:
        history = await self.load("size_history") or []
        entry = {
            "brand": brand,
            "product_type": product_type,
            "recommended_size": recommendation.get("recommended_size"),
            "confidence": recommendation.get("confidence"),
            "body_type": recommendation.get("body_type"),
            "saved_at": _now(),
        }
        history.insert(0, entry)
        del history[self.history_limit:]
        return await self.save("size_history", history)

    async def get_size_history(self) -> List[Dict[str, Any]]:
        return await self.load("size_history") or []

    async def clear_size_history(self) -> Dict[str, Any]:
        return await self.delete("size_history")

    # Favorites

    async def save_favorite(self, item: Mapping[str, Any]) -> Dict[str, Any]:
        favorites = await self.load("favorites") or []
        favorite = {
            "id": item.get("id") or _new_id(),
            "brand": item.get("brand"),
            "product": item.get("product"),
            "size": item.get("size"),
            "price": item.get("price"),
            "image_url": item.get("image_url"),
            "url": item.get("url"),
            "saved_at": _now(),
        }
        favorites.insert(0, favorite)
        return await self.save("favorites", favorites)

    async def get_favorites(self) -> List[Dict[str, Any]]:
        return await self.load("favorites") or []

    async def remove_favorite(self, item_id: str) -> Dict[str, Any]:
        favorites = await self.get_favorites()
        return await self.save("favorites", [f for f in favorites if f.get("id") != item_id])

    # Outfits

    async def save_outfit(self, outfit: Mapping[str, Any]) -> Dict[str, Any]:
        outfits = await self.load("outfits") or []
        data = {
            "id": outfit.get("id") or _new_id(),
            "name": outfit.get("name"),
            "items": outfit.get("items") or [],
            "total_cost": outfit.get("total_cost"),
            "created_at": _now(),
        }
        outfits.insert(0, data)
        return await self.save("outfits", outfits)

    async def get_outfits(self) -> List[Dict[str, Any]]:
        return await self.load("outfits") or []

    async def delete_outfit(self, outfit_id: str) -> Dict[str, Any]:
        outfits = await self.get_outfits()
        return await self.save("outfits", [o for o in outfits if o.get("id") != outfit_id])

    # Preferences

    async def save_preferences(self, prefs: Mapping[str, Any]) -> Dict[str, Any]:
        data = {
            "measurement_unit": prefs.get("measurement_unit") or "cm",
            "currency": prefs.get("currency") or "USD",
            "notifications": prefs.get("notifications") is not False,
            "dark_mode": bool(prefs.get("dark_mode", False)),
            "language": prefs.get("language") or "en",
            "privacy_mode": prefs.get("privacy_mode") is not False,
            "updated_at": _now(),
        }
        return await self.save("preferences", data)

    async def get_preferences(self) -> Dict[str, Any]:
        saved = await self.load("preferences") or {}
        return {**DEFAULT_PREFERENCES, **saved}

    # Subscription

    async def save_subscription(self, subscription: Mapping[str, Any]) -> Dict[str, Any]:
        data = {
            "plan": subscription.get("plan"),
            "expires_at": subscription.get("expires_at"),
            "features": subscription.get("features") or [],
            "saved_at": _now(),
        }
        return await self.save("subscription", data)

    async def get_subscription(self) -> Dict[str, Any]:
        saved = await self.load("subscription")
        if not saved:
            return {**FREE_SUBSCRIPTION, "features": list(FREE_SUBSCRIPTION["features"])}
        return saved

    async def is_premium(self) -> bool:
        subscription = await self.get_subscription()
        return subscription.get("plan") in PREMIUM_PLANS

    # Export / import

    async def export_all_data(self) -> Dict[str, Any]:
        profile, measurements, avatar, history, favorites, outfits, preferences, subscription = await asyncio.gather(
            self.get_user_profile(),
            self.get_measurements(),
            self.get_avatar_data(),
            self.get_size_history(),
            self.get_favorites(),
            self.get_outfits(),
            self.get_preferences(),
            self.get_subscription(),
        )
        return {
            "profile": profile,
            "measurements": measurements,
            "avatar": avatar,
            "history": history,
            "favorites": favorites,
            "outfits": outfits,
            "preferences": preferences,
            "subscription": subscription,
            "exported_at": _now(),
        }

    async def import_all_data(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            return {"success": False, "error": "Import data must be an object"}
        for section, expected in IMPORT_SECTIONS.items():
            value = data.get(section)
            if value and not isinstance(value, expected):
                logger.warning("storage_import_rejected", section=section, got=type(value).__name__)
                kind = "a list" if expected is list else "an object"
                return {"success": False, "error": f'Import section "{section}" must be {kind}'}

        writes = []
        if data.get("profile"):
            writes.append(self.save_user_profile(data["profile"]))
        if data.get("measurements"):
            writes.append(self.save_measurements(data["measurements"]))
        if data.get("avatar"):
            writes.append(self.save_avatar_data(data["avatar"]))
        if data.get("history"):
            writes.append(self.save("size_history", list(data["history"])[: self.history_limit]))
        if data.get("favorites"):
            writes.append(self.save("favorites", data["favorites"]))
        if data.get("outfits"):
            writes.append(self.save("outfits", data["outfits"]))
        if data.get("preferences"):
            writes.append(self.save_preferences(data["preferences"]))
        if data.get("subscription"):
            writes.append(self.save_subscription(data["subscription"]))

        results = await asyncio.gather(*writes)
        success = all(r.get("success") for r in results)
        logger.info("storage_import", keys=len(results), success=success)
        return {"success": success}

    async def get_storage_info(self) -> Dict[str, Any]:
        try:
            exported = await self.export_all_data()
            size = len(json.dumps(exported))
            profile = exported.get("profile") or {}
            return {
                "total_items": len(exported),
                "size_bytes": size,
                "size_kb": f"{size / 1024:.2f}",
                "size_mb": f"{size / 1024 / 1024:.2f}",
                "last_updated": profile.get("updated_at") or _now(),
            }
        except Exception as e:
            logger.error("storage_info_error", error=str(e))
            return {"error": str(e)}

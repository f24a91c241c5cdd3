from gmethod.models.user_content import WISH_TYPE_DREAM, WISH_TYPE_SOLUTION
from gmethod.services.actions.base import BaseActions
from gmethod.services.actions.broadcasts import BroadcastActions
from gmethod.services.actions.experiences import ExperienceActions
from gmethod.services.actions.feelings import FeelingButtonActions, HappinessActions, HateActions
from gmethod.services.actions.g_messages import ADMIN_PREFIXES, GMessageActions, GMessageAdminActions
from gmethod.services.actions.general import GeneralActions
from gmethod.services.actions.registry import ActionDeps, ActionHandler, ActionRegistry
from gmethod.services.actions.wishes import WishActions


def build_action_registry() -> ActionRegistry:
    """Registry with every action the dialogue graph refers to."""
    registry = ActionRegistry()

    for name in ("save_selected_option", "thanks_count_show", "thanks_count_reset"):
        registry.register_method(name, GeneralActions, name)

    for prefix, wish_type in (("dream_wishes", WISH_TYPE_DREAM), ("solution_wishes", WISH_TYPE_SOLUTION)):
        for operation in ("index", "create", "edit", "update", "destroy"):
            registry.register_method(f"{prefix}_{operation}", WishActions, operation, wish_type=wish_type)
    registry.register_method("dream_wish_file_show", WishActions, "file_show", wish_type=WISH_TYPE_DREAM)

    for operation in ("index", "create", "edit", "update", "destroy", "destroy_all"):
        registry.register_method(f"hates_{operation}", HateActions, operation)

    for operation in ("index", "create", "destroy"):
        registry.register_method(f"happiness_{operation}", HappinessActions, operation)

    registry.register_method("find_or_create_feeling_settings", FeelingButtonActions, "find_or_create")
    registry.register_method("echo_feeling", FeelingButtonActions, "echo")
    registry.register_method("feeling_setting_index", FeelingButtonActions, "index")
    registry.register_method("feeling_setting_edit", FeelingButtonActions, "edit")
    registry.register_method("feeling_setting_update", FeelingButtonActions, "update")

    registry.register_method("experiences_index", ExperienceActions, "index")
    registry.register_method("experiences_show", ExperienceActions, "show")

    registry.register_method("g_messages_show", GMessageActions, "show")

    for period, prefix in ADMIN_PREFIXES.items():
        registry.register_method(f"{prefix}_create", GMessageAdminActions, "create", period=period)
        registry.register_method(f"{prefix}_index", GMessageAdminActions, "index", period=period)
        for operation in ("edit", "update", "destroy"):
            registry.register_method(
                f"{prefix}_{operation}", GMessageAdminActions, "unresolved_selection", period=period
            )

    registry.register_method("broadcasts_confirm", BroadcastActions, "confirm")
    registry.register_method("broadcasts", BroadcastActions, "send")

    return registry


__all__ = ["ActionDeps", "ActionHandler", "ActionRegistry", "BaseActions", "build_action_registry"]

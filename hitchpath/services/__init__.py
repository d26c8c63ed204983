from hitchpath.services.generation import GenerationGateway
from hitchpath.services.paths import create_named_path, get_main_path, reset_main_path
from hitchpath.services.progress import set_resource_saved, set_step_completion

__all__ = [
    "GenerationGateway",
    "create_named_path",
    "get_main_path",
    "reset_main_path",
    "set_resource_saved",
    "set_step_completion",
]

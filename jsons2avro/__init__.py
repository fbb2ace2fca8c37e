import importlib

mod = "jsons2avro"
class LazyLoader:
    """
    Lazy loader for the jsons2avro functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        try:
            return self._load_module(f"{mod}.{item}")
        except ModuleNotFoundError as e:
            if e.name != f"{mod}.{item}":
                raise
            raise AttributeError(f"module '{mod}' has no attribute '{item}'") from e

# Define the public names and their corresponding module paths
_mappings = {
    "convert_jsons_to_avro": (f"{mod}.jsonstoavro", "convert_jsons_to_avro"),
    "convert_jsons_file_to_avro": (f"{mod}.jsonstoavro", "convert_jsons_file_to_avro"),
    "JsonSchemaToAvroConverter": (f"{mod}.jsonstoavro", "JsonSchemaToAvroConverter"),
    "JsonSchemaToAvroError": (f"{mod}.jsonstoavro", "JsonSchemaToAvroError"),
    "MissingSchemaError": (f"{mod}.jsonstoavro", "MissingSchemaError"),
    "MissingIdentifierError": (f"{mod}.jsonstoavro", "MissingIdentifierError"),
    "InvalidIdentifierError": (f"{mod}.jsonstoavro", "InvalidIdentifierError"),
    "UnsupportedTypeError": (f"{mod}.jsonstoavro", "UnsupportedTypeError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)

import importlib

mod = "modelize"
class LazyLoader:
    """    
    Lazy loader for the modelize functions to speed up startup time.    
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
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "merge": (f"{mod}.unifier", "merge"),
    "reduce_values": (f"{mod}.unifier", "reduce_values"),
    "upgrade": (f"{mod}.upgrader", "upgrade"),
    "descriptor_of": (f"{mod}.schema_tree", "descriptor_of"),
    "type_name_of": (f"{mod}.common", "type_name_of"),
    "property_name_of": (f"{mod}.common", "property_name_of"),
    "infer_schema_tree": (f"{mod}.jsontotree", "infer_schema_tree"),
    "convert_json_to_tree": (f"{mod}.jsontotree", "convert_json_to_tree"),
    "convert_tree_to_swift": (f"{mod}.treetoswift", "convert_tree_to_swift"),
    "convert_json_to_swift": (f"{mod}.treetoswift", "convert_json_to_swift"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)

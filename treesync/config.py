"""Configuration system for treesync.

This module defines how users tune an editor: how element ids are formed,
the initial expansion state of new nodes, animation defaults and how
failed operations are reported.
"""

from dataclasses import dataclass
from typing import Any, Callable, Hashable, List, Optional


@dataclass
class EditorConfig:
    """Complete configuration for an EditorManager.

    The editor validates this configuration on construction and refuses
    invalid ones.
    """

    # Element naming; must mention both {tree} and {node}
    element_id_template: str = "{tree}_step_{node}"

    # Initial expansion flags of newly created nodes
    children_open: bool = True
    panel_open: bool = True

    # Default animation of user-triggered toggles
    animate: bool = True

    # Error handling
    verbose_errors: bool = True  # Print a warning for every failed operation
    on_error: Optional[Callable[[BaseException, str, Any], None]] = None

    def element_id(self, tree_id: Hashable, node_id: Hashable) -> str:
        """Format the element id of a node."""
        return self.element_id_template.format(tree=tree_id, node=node_id)

    # Convenience constructors for common configurations

    @classmethod
    def quiet(cls) -> 'EditorConfig':
        """Create config for headless use: no animations, no warnings.

        Returns:
            EditorConfig suited to batch edits and tests
        """
        return cls(animate=False, verbose_errors=False)

    @classmethod
    def collapsed(cls) -> 'EditorConfig':
        """Create config where new nodes start with children and panel closed.

        Returns:
            EditorConfig for compact outlines
        """
        return cls(children_open=False, panel_open=False)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if "{tree}" not in self.element_id_template:
            errors.append("element_id_template must contain {tree}")
        if "{node}" not in self.element_id_template:
            errors.append("element_id_template must contain {node}")
        if not errors:
            try:
                self.element_id("t", 0)
            except (KeyError, IndexError, ValueError) as e:
                errors.append(f"element_id_template is not a valid format string: {e}")

        if self.on_error is not None and not callable(self.on_error):
            errors.append("on_error must be callable")

        return errors

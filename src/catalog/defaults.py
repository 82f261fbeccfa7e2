"""Bundled component definitions for the default catalog.

Mirrors the shadcn/ui-style component set the generator is prompted with.
Every component also accepts the common ``className`` and ``children``
properties.
"""

from typing import Any

from .lib import ComponentCategory, ComponentDefinition, PropertySchema, ValueKind


def _prop(kind: ValueKind, description: str = "", **kwargs: Any) -> PropertySchema:
    return PropertySchema(value_kind=kind, description=description, **kwargs)


def _enum(description: str, *values: str, **kwargs: Any) -> PropertySchema:
    return PropertySchema(
        value_kind=ValueKind.STRING,
        allowed_values=values,
        description=description,
        **kwargs,
    )


COMMON_PROPS: dict[str, PropertySchema] = {
    "className": _prop(ValueKind.STRING, "Additional CSS class names"),
    "children": _prop(ValueKind.OBJECT, "Child elements"),
}


def _component(
    name: str,
    category: ComponentCategory,
    description: str,
    props: dict[str, PropertySchema] | None = None,
    aliases: tuple[str, ...] = (),
    **kwargs: Any,
) -> ComponentDefinition:
    return ComponentDefinition(
        name=name,
        aliases=aliases,
        property_schemas={**COMMON_PROPS, **(props or {})},
        category=category,
        description=description,
        **kwargs,
    )


_LAYOUT = ComponentCategory.LAYOUT
_INPUT = ComponentCategory.INPUT
_DISPLAY = ComponentCategory.DISPLAY
_FEEDBACK = ComponentCategory.FEEDBACK
_NAVIGATION = ComponentCategory.NAVIGATION

_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")


DEFAULT_COMPONENTS: tuple[ComponentDefinition, ...] = (
    # === LAYOUT ===
    _component(
        "Container",
        _LAYOUT,
        "Generic layout container for grouping child elements",
        {
            "direction": _enum("Flow direction of children", "row", "column"),
            "gap": _prop(ValueKind.NUMBER, "Spacing between children"),
        },
        aliases=(
            "div",
            "box",
            "wrapper",
            "section",
            "view",
            "flex",
            "grid",
            "stack",
            "row",
            "column",
        ),
    ),
    _component("Card", _LAYOUT, "Bordered surface grouping related content"),
    _component("CardHeader", _LAYOUT, "Header area of a card"),
    _component("CardTitle", _LAYOUT, "Title text of a card"),
    _component("CardDescription", _LAYOUT, "Secondary text under a card title"),
    _component("CardContent", _LAYOUT, "Main content area of a card"),
    _component("CardFooter", _LAYOUT, "Footer area of a card, usually actions"),
    _component(
        "Separator",
        _LAYOUT,
        "Visual divider between content groups",
        {"orientation": _enum("Divider axis", "horizontal", "vertical")},
    ),
    _component(
        "Tabs",
        _LAYOUT,
        "Tabbed container switching between content panels",
        {"defaultValue": _prop(ValueKind.STRING, "Initially selected tab")},
    ),
    _component("TabsList", _LAYOUT, "Row of tab triggers"),
    _component(
        "TabsTrigger",
        _LAYOUT,
        "Button selecting a tab panel",
        {"value": _prop(ValueKind.STRING, "Tab identifier", required=True)},
    ),
    _component(
        "TabsContent",
        _LAYOUT,
        "Panel shown when its tab is selected",
        {"value": _prop(ValueKind.STRING, "Tab identifier", required=True)},
    ),
    _component(
        "Spacer",
        _LAYOUT,
        "Empty flexible space between siblings",
        {"size": _prop(ValueKind.NUMBER, "Fixed size in pixels")},
        deprecated=True,
        deprecation_message="Use Container with the gap property instead",
    ),
    # === DISPLAY ===
    _component(
        "Text",
        _DISPLAY,
        "Inline or block text content",
        {
            "content": _prop(ValueKind.STRING, "Text to display"),
            "variant": _enum(
                "Typographic role", "body", "heading", "caption", "muted"
            ),
        },
        aliases=("span", "txt", "heading", "title", "paragraph", *_HEADINGS),
    ),
    _component(
        "Image",
        _DISPLAY,
        "Raster or vector image",
        {
            "src": _prop(ValueKind.STRING, "Image URL", required=True, default_value=""),
            "alt": _prop(ValueKind.STRING, "Alternative text"),
        },
        aliases=("img",),
    ),
    _component(
        "Icon",
        _DISPLAY,
        "Named icon glyph",
        {
            "name": _prop(ValueKind.STRING, "Icon name", required=True),
            "size": _prop(ValueKind.NUMBER, "Icon size in pixels"),
        },
    ),
    _component(
        "Badge",
        _DISPLAY,
        "Small status or count label",
        {
            "variant": _enum(
                "Badge style", "default", "secondary", "destructive", "outline"
            )
        },
    ),
    _component("Table", _DISPLAY, "Tabular data", aliases=("tbl",)),
    _component("TableHeader", _DISPLAY, "Header row group of a table"),
    _component("TableBody", _DISPLAY, "Body row group of a table"),
    _component("TableFooter", _DISPLAY, "Footer row group of a table"),
    _component("TableRow", _DISPLAY, "Single table row"),
    _component("TableHead", _DISPLAY, "Header cell"),
    _component("TableCell", _DISPLAY, "Data cell"),
    _component("TableCaption", _DISPLAY, "Caption describing a table"),
    # === INPUT ===
    _component(
        "Button",
        _INPUT,
        "A clickable button component with multiple variants",
        {
            "variant": _enum(
                "Button style variant",
                "default",
                "destructive",
                "outline",
                "secondary",
                "ghost",
                "link",
            ),
            "size": _enum(
                "Button size", "default", "sm", "lg", "icon", "icon-sm", "icon-lg"
            ),
            "disabled": _prop(ValueKind.BOOLEAN, "Whether the button is disabled"),
            "onClick": _prop(ValueKind.FUNCTION, "Click event handler"),
        },
        aliases=("btn",),
    ),
    _component(
        "Input",
        _INPUT,
        "A text input field component",
        {
            "type": _enum(
                "Input type",
                "text",
                "password",
                "email",
                "number",
                "tel",
                "url",
                "search",
            ),
            "placeholder": _prop(ValueKind.STRING, "Placeholder text"),
            "value": _prop(ValueKind.STRING, "Input value"),
            "disabled": _prop(ValueKind.BOOLEAN, "Whether the input is disabled"),
            "onChange": _prop(ValueKind.FUNCTION, "Change event handler"),
        },
        aliases=("inp", "textfield", "textbox"),
    ),
    _component(
        "Label",
        _INPUT,
        "Caption associated with a form control",
        {"htmlFor": _prop(ValueKind.STRING, "Id of the labelled control")},
        aliases=("lbl",),
    ),
    _component(
        "Textarea",
        _INPUT,
        "Multi-line text input",
        {
            "placeholder": _prop(ValueKind.STRING, "Placeholder text"),
            "rows": _prop(ValueKind.NUMBER, "Visible text lines"),
        },
    ),
    _component(
        "Checkbox",
        _INPUT,
        "Binary checked state control",
        {"checked": _prop(ValueKind.BOOLEAN, "Checked state")},
        aliases=("chk", "checkbox"),
    ),
    _component(
        "Switch",
        _INPUT,
        "On/off toggle switch",
        {"checked": _prop(ValueKind.BOOLEAN, "On state")},
    ),
    _component(
        "Slider",
        _INPUT,
        "Range selection along a track",
        {
            "value": _prop(ValueKind.ARRAY, "Selected value(s)"),
            "min": _prop(ValueKind.NUMBER, "Lower bound"),
            "max": _prop(ValueKind.NUMBER, "Upper bound"),
            "step": _prop(ValueKind.NUMBER, "Step increment"),
        },
    ),
    _component("RadioGroup", _INPUT, "Group of mutually exclusive options"),
    _component(
        "RadioGroupItem",
        _INPUT,
        "Single option in a radio group",
        {"value": _prop(ValueKind.STRING, "Option value", required=True)},
    ),
    _component(
        "Select",
        _INPUT,
        "Dropdown choice among options",
        {
            "value": _prop(ValueKind.STRING, "Selected value"),
            "placeholder": _prop(ValueKind.STRING, "Placeholder text"),
        },
        aliases=("sel", "dropdown"),
    ),
    _component(
        "SelectItem",
        _INPUT,
        "Single option in a select",
        {"value": _prop(ValueKind.STRING, "Option value", required=True)},
    ),
    _component(
        "ToggleGroup",
        _INPUT,
        "Set of toggle buttons",
        {
            "type": _enum(
                "Selection mode",
                "single",
                "multiple",
                required=True,
                default_value="single",
            )
        },
    ),
    # === FEEDBACK ===
    _component(
        "Progress",
        _FEEDBACK,
        "Completion indicator",
        {"value": _prop(ValueKind.NUMBER, "Percent complete")},
    ),
    _component(
        "Alert",
        _FEEDBACK,
        "Callout for important messages",
        {"variant": _enum("Alert style", "default", "destructive")},
    ),
    # === NAVIGATION ===
    _component(
        "Link",
        _NAVIGATION,
        "Hyperlink to another location",
        {"href": _prop(ValueKind.STRING, "Target URL", required=True)},
        aliases=("a",),
    ),
)


__all__ = ["COMMON_PROPS", "DEFAULT_COMPONENTS"]

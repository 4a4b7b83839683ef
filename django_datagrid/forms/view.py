from __future__ import annotations

from typing import Any, Dict, Iterator


class FormView:
    """Render-ready snapshot of a :class:`GridForm` tree.

    Indexing by name returns a child view when one exists, otherwise the bound
    field, so templates can write ``form_view.actions`` or
    ``form_view.filter_submit_button`` alike.
    """

    def __init__(self, form, parent: "FormView | None" = None):
        self.form = form
        self.parent = parent
        self.vars: Dict[str, Any] = {
            "name": form.name,
            "label": form.label,
            "action": form.action,
            "method": form.method,
            "attr": dict(form.attrs),
            "prefix": form.prefix,
        }
        self.fields = {name: form[name] for name in form.fields}
        self.children = {name: FormView(child, parent=self) for name, child in form.children.items()}

    def __getitem__(self, name: str):
        if name in self.children:
            return self.children[name]
        return self.fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self.children or name in self.fields

    def __iter__(self) -> Iterator[Any]:
        yield from self.fields.values()
        yield from self.children.values()

    def __len__(self) -> int:
        return len(self.fields) + len(self.children)

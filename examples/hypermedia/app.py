"""Hypermedia demo: whole pages and htmx fragments from the same templates.

Demonstrates:
1. ``Page``: one route serves the full document or just the fragment
   htmx targets
2. ``Fragment``: POST handlers return only the block that changed
3. ``OOB``: a second fragment swapped out-of-band into another element
4. Static assets: the ``static/`` directory plus a single-file mount

Run:
    pip install wren[server]
    python app.py
"""

import itertools
import threading
from dataclasses import dataclass
from pathlib import Path

from wren import OOB, App, AppConfig, Fragment, Page, Request, Response, Template
from wren.middleware import StaticFiles

HERE = Path(__file__).parent

# ---------------------------------------------------------------------------
# Data model: frozen dataclasses, bound straight into template context
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Todo:
    id: int
    text: str
    done: bool = False


@dataclass(frozen=True, slots=True)
class Contact:
    id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class ContactForm:
    """Submitted form values, echoed back with an error on rejection."""

    name: str = ""
    email: str = ""
    email_error: str = ""


# In-memory state. Handlers may run concurrently, so every mutation
# holds _lock.
_lock = threading.Lock()
_todo_ids = itertools.count(1)
_contact_ids = itertools.count(1)
_todos: list[Todo] = []
_contacts: list[Contact] = [Contact(next(_contact_ids), "John Doe", "johndoe@hotmail.com")]
_count = 0

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = App(
    AppConfig(
        template_dir=HERE / "templates",
        static_dir=HERE / "static",
    )
)
app.add_middleware(StaticFiles(files={"/assets/main.css": HERE / "assets" / "main.css"}))


@app.route("/")
def index():
    return Template("index", title="wren demos")


# -- Todos ------------------------------------------------------------------


@app.route("/todos", fragment="todos-list")
def list_todos():
    """Full page, or the ``todos_list`` block for htmx requests."""
    return Page("todos/list", items=list(_todos))


@app.route("/todos", methods=["POST"])
async def add_todo(request: Request):
    """Add a todo and return the refreshed list fragment."""
    form = await request.form()
    text = form.get("text").strip()
    if not text:
        return Fragment("todos/list", "todos_list", items=list(_todos)), 422
    with _lock:
        _todos.append(Todo(next(_todo_ids), text))
        items = list(_todos)
    return Fragment("todos/list", "todos_list", items=items)


@app.route("/todos/{todo_id:int}/toggle", methods=["POST"])
def toggle_todo(todo_id: int):
    """Flip a todo's done state and return the list fragment."""
    with _lock:
        for i, todo in enumerate(_todos):
            if todo.id == todo_id:
                _todos[i] = Todo(todo.id, todo.text, not todo.done)
                break
        else:
            return Response("No such todo", status=404, content_type="text/plain; charset=utf-8")
        items = list(_todos)
    return Fragment("todos/list", "todos_list", items=items)


# -- Counter ----------------------------------------------------------------


@app.route("/counter")
def counter():
    return Page("counter", "count", count=_count)


@app.route("/counter/increment", methods=["POST"])
def increment():
    """Increment the shared counter and return only the ``count`` block."""
    global _count
    with _lock:
        _count += 1
        value = _count
    return Fragment("counter", "count", count=value)


# -- Contacts ---------------------------------------------------------------


@app.route("/contacts")
def contacts():
    """Contacts newest first, with an empty add-contact form."""
    return Page("contacts", "contacts-list", contacts=_contacts[::-1], form=ContactForm())


@app.route("/contacts", methods=["POST"])
async def add_contact(request: Request):
    """Add a contact.

    Success resets the form and prepends the new row to the list
    out-of-band. A duplicate email re-renders the form with the
    submitted values and an error, status 422.
    """
    form = await request.form()
    name = form.get("name").strip()
    email = form.get("email").strip()

    with _lock:
        if any(c.email == email for c in _contacts):
            rejected = ContactForm(name, email, email_error="Email already exists")
            return Fragment("contacts", "contact_form", form=rejected), 422
        contact = Contact(next(_contact_ids), name, email)
        _contacts.append(contact)

    return OOB(
        Fragment("contacts", "contact_form", form=ContactForm()),
        Fragment("contacts/row", "contact_row", target="contacts-list", contact=contact),
        swap="afterbegin",
    )


@app.error(404)
def not_found():
    return Response(
        "This site does not exist :(",
        status=404,
        content_type="text/plain; charset=utf-8",
    )


if __name__ == "__main__":
    app.run()

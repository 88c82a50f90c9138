# ompcore

`ompcore` gives the building blocks a scene-based application sits on: a JSON document type, thread-safe containers, a work-stealing thread pool, an undo/redo command history, a yaw/pitch camera and a registry of assets stored as JSON files. It uses only the standard library.

## Modules

- `ompcore.json_parser`: `JsonParser` is a JSON object. You read and write members by key with `read_value`, `write_value`, `read_object` and `write_object`. You test for a key with `contains` or `in`. You load and save it with `populate_from_file` and `write_to_file`, which return `False` when the file cannot be opened. `to_string()` gives compact JSON with sorted keys. `to_dict()` gives a deep copy. `read_value` returns `None` for a missing key. `read_object` raises `KeyError` for a missing key.
- `ompcore.threadsafe_queue`: `ThreadSafeQueue` is a FIFO queue with `push`, `try_pop(default=None)` and `empty`. None of them block while waiting for items.
- `ompcore.threadsafe_map`: `ThreadSafeMap(num_buckets=19, hasher=hash)` is a map split into buckets, each with its own lock. It has `value_for(key, default=None)`, `add_or_update_mapping`, `remove_mapping` and `foreach(functor)`. `foreach` calls `functor(key, value)`.
- `ompcore.thread_pool`:
  - `ThreadPool(thread_count=None)` uses at most one worker per CPU. `submit(function, *args, **kwargs)` returns a `concurrent.futures.Future`. `run_pending_task()` runs one queued task in the calling thread. `shutdown()` stops the workers and cancels the tasks still queued. The pool can be used as a context manager.
  - The module also has `WorkStealingQueue`.
  - Cooperative interruption is provided by `InterruptibleThread`, `InterruptFlag`, `interruption_point()`, `interruptible_wait(condition)` and the `ThreadInterrupted` exception.
- `ompcore.commands`: `Command` is the abstract base, with `execute` and `undo`. `CommandStack(max_stack_size=20)` builds and runs commands and keeps bounded undo and redo histories. `CommandStackProxy` runs commands on a stack through a weak reference and returns `False` once the stack is gone.
- `ompcore.core_lib`: `generate_id32()` and `generate_id64()` build identifiers from the clock, the thread and a counter.
- `ompcore.camera`:
  - `Camera(position, up, yaw, pitch)` gathers input with `process_keyboard(CameraMovement...)` and `process_mouse_movement`. `apply_inputs(delta_time)` applies that input.
  - `view_matrix()` returns a look-at matrix as four rows.
  - `on_scene_save` and `on_scene_load` store and restore the camera's state in a `JsonParser`.
  - `speed`, `sensitivity`, `view_angle`, `near_clipping` and `far_clipping` are clamped on assignment.
- `ompcore.serializable`: `SerializableObject` is the abstract base for objects kept in assets. Subclasses implement `serialize(parser)` and `deserialize(parser)`.
- `ompcore.object_factory`: `register_class(class_name, factory)` and `create_serializable_object(class_name)`. An unknown name gives `None`.
- `ompcore.asset`: `AssetHandle`, `MetaData` and `Asset`. An `Asset` holds one object with its metadata and its parent/child links.
- `ompcore.asset_manager`: `AssetManager(thread_pool=None)` has these methods:
  - `create_asset`
  - `get_asset`
  - `load_project` and `load_project_async`
  - `load_asset` and `load_asset_async`
  - `load_all_assets`
  - `save_asset`
  - `save_project`
  - `delete_asset`
  - `close`

  Assets are found by handle, by id or by path. Without a thread pool the work runs at once and the returned future is already done.

## Installation

```
pip install .
```

## Examples

Write and read JSON:

```python
from ompcore.json_parser import JsonParser

parser = JsonParser()
parser.write_value("name", "firstname")
parser.write_value("age", 5)
parser.write_to_file("one.json")

loaded = JsonParser()
loaded.populate_from_file("one.json")
assert loaded.read_value("age") == 5
```

Submit work to a thread pool:

```python
from ompcore.thread_pool import ThreadPool

with ThreadPool(4) as pool:
    future = pool.submit(lambda a, b: a + b, 3.0, 5.0)
    assert future.result() == 8.0
```

Undo and redo commands:

```python
from ompcore.commands import Command, CommandStack

class SetValue(Command):
    def __init__(self, box):
        self.box = box
        self.previous = None

    def execute(self):
        self.previous = self.box[0]
        self.box[0] = 8

    def undo(self):
        self.box[0] = self.previous

box = [20]
stack = CommandStack()
stack.execute(SetValue, box)   # box == [8]
stack.undo()                   # box == [20]
stack.redo()                   # box == [8]
```

### Assets

An asset can only hold an object of a class registered with the factory, so register one first. The asset's directory must exist: if the file cannot be written, saving logs a warning and nothing is written.

```python
from ompcore.asset_manager import AssetManager
from ompcore.object_factory import register_class
from ompcore.serializable import SerializableObject

class Note(SerializableObject):
    def __init__(self):
        self.text = ""

    def serialize(self, parser):
        parser.write_value("text", self.text)

    def deserialize(self, parser):
        self.text = parser.read_value("text") or ""

register_class("Note", Note)

manager = AssetManager(None)
handle = manager.create_asset("note", "assets/note.json", "Note")
manager.get_asset(handle).object_as(Note).text = "hello"
manager.save_project().result()

other = AssetManager(None)
other.load_project("assets")
note = other.load_asset("assets/note.json").object_as(Note)
assert note.text == "hello"
```

`create_asset` returns `AssetHandle.INVALID_HANDLE` if the path is already registered.

## What the package does not do

The package defines no scene, model, material, texture or shader classes. `AssetManager` does not register any class names of its own: every class that an asset holds must first be registered with `register_class`. There is no renderer, no window, no user interface and no command-line program. `delete_asset` removes an asset from the registry but leaves its file on disk.

## Tests

```
pip install .[test]
pytest
```
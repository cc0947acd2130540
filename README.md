# langactor

A small in-process actor framework for Python, built on threads and the
standard library only.

Each actor has an `actor://` address, a private state, a mailbox and a thread
of its own. Messages delivered to an actor are handled one at a time by its
processing function, `processing_fn(msg, actor)`, which returns the actor's
next state. Only messages whose `mutation` property is true replace the state;
for other messages the returned value is ignored.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `langactor.framework`

- `Message` - a protocol: any object with a `sender` address and a boolean
  `mutation` property.
- `parse_address(text)` - splits an address such as `actor://host/path`
  (an already parsed address is returned unchanged).
- `ActorStatus` - `RUNNING` or `IDLE`.
- `BackpressurePolicy` - `BLOCK`, `FAIL`, `UNBOUNDED`, `DROP_NEWEST`,
  `DROP_OLDEST`.
- `MailboxConfig(capacity=100, policy=BackpressurePolicy.BLOCK)` - mailbox
  settings. A capacity of zero or less falls back to 100; the `UNBOUNDED`
  policy uses a capacity of 1,000,000 and waits when that is reached.
- Helpers returning a `MailboxConfig`:
  - `block_policy(capacity)` - delivery waits while the mailbox is full;
  - `fail_policy(capacity)` - delivery raises `MailboxFullError` when full;
  - `drop_newest_policy(capacity)` - new messages are silently dropped when full;
  - `drop_oldest_policy(capacity)` - the oldest queued message makes room for the new one;
  - `unbounded_policy()` - the fail policy with a capacity of 1,000,000.
- Errors, all deriving from `ActorError`: `InvalidActorAddressError`,
  `ActorNotRunningError`, `InvalidChildURLError`, `MailboxFullError`.

### `langactor.actor`

- `new_actor(address, processing_fn, initial_state, mailbox_config=None)` -
  creates and starts a root actor. Any scheme other than `actor` raises
  `InvalidActorAddressError`.
- `spawn_child(parent, processing_fn, initial_state, mailbox_config=None)` -
  creates a child at `actor://<parent host><parent path>/<uuid>` and appends
  it to the parent.
- `Actor` - with the properties `address`, `state`, `status` and `parent`
  (None for a root actor), and the methods:
  - `deliver(msg)` - puts a message in the mailbox according to the policy;
    raises `ActorNotRunningError` once the actor is idle;
  - `send(msg, addressable)` - delivers a message to another actor;
  - `append(child)` - registers a child whose address lies one path segment
    below this actor's; otherwise, or if it is already there, raises
    `InvalidChildURLError`;
  - `crop(address)` - stops a child, waits for it, removes it and returns it;
  - `stop()` - crops every child, then stops the actor and returns a
    `threading.Event` that is set once the actor is idle. The actor first
    processes what is left in its mailbox, for at most five seconds.
    Stopping an actor that is not running raises `ActorNotRunningError`.

An exception raised by a processing function is logged through the
`logging` module and the actor goes on with its next message.

### `langactor.routing`

- `AddressBook` - a thread-safe map from addresses to actors.
  `register(actor)` raises `ActorAlreadyRegisteredError` if the address is
  taken; `lookup(address)` raises `ActorNotFoundError` for an unknown one;
  `tear_down()` forgets every actor.

## Example

```python
from dataclasses import dataclass
from langactor.actor import new_actor
from langactor.framework import parse_address

@dataclass(frozen=True)
class Count:
    sender: object
    mutation: bool = True

counter = new_actor("actor://counter", lambda msg, actor: actor.state + 1, 0)
for _ in range(3):
    counter.deliver(Count(sender=parse_address("actor://counter")))
counter.stop().wait()
print(counter.state)  # 3
```

## Example programs

Each program reads from standard input:

```
langactor-echo            # echoes every line with a running count
langactor-echowithchild   # a child actor upper-cases and decorates the line, the parent prints it
langactor-pingpong        # after enter, two actors found through an address book bounce a message
langactor-selfpingpong    # after enter, one actor sends a message to itself a few times
langactor-sort            # merge sort of a line of space-separated integers by a tree of actors
langactor-calculator      # evaluates expressions with (), + and * using child actors
```

Type `exit` (or end the input) to leave `langactor-echo`,
`langactor-echowithchild` and `langactor-calculator`.

## What it does not do

Actors live in one Python process: only the `actor://` scheme is accepted and
messages never travel over a network or between processes. There is no
supervision or restart of failing actors; a failed message is only logged.
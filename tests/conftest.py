from pytest import Item, fixture

from keycalc.engine import Engine
from keycalc.keypad import Keypad
from keycalc.session import Session


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def engine() -> Engine:
    return Engine()


@fixture
def session() -> Session:
    return Session()


@fixture
def keypad() -> Keypad:
    return Keypad()


@fixture
def press(keypad):
    '''
    Return function typing a line of keys on a session.
    '''
    def press(session: Session, keys: str) -> Session:
        for event in keypad.events_from(keys):
            session.feed(event)
        return session
    return press

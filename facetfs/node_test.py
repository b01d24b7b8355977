import threading

from facetfs.node import Node, StaticLookup


def test_node_get_set() -> None:
    node = Node()
    assert node.kind == "file"
    assert node.size == 0
    assert node.get("posix:group") is None
    node.set("posix:group", "staff")
    node.set("dos:hidden", True)
    assert node.get("posix:group") == "staff"
    assert node.keys() == ["dos:hidden", "posix:group"]


def test_node_ids_are_unique() -> None:
    assert len({Node().id for _ in range(100)}) == 100
    assert Node(node_id="abc").id == "abc"
    assert Node("directory", size=4096).kind == "directory"


def test_node_concurrent_writes() -> None:
    node = Node()

    def write(i: int) -> None:
        for j in range(100):
            node.set(f"test:k{i}-{j}", j)

    threads = [threading.Thread(target=write, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(node.keys()) == 800


def test_static_lookup() -> None:
    node = Node()
    assert StaticLookup(node).resolve() is node

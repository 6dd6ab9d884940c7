import unittest

from brainstorm.graph.model import MASTER_NODE_ID
from brainstorm.storage.memory import create_session


class TestSessionDefaults(unittest.TestCase):
    def test_new_session_starts_from_master_node(self) -> None:
        # Every brainstorm is anchored on the master node; the first model call
        # attaches its sections there.
        session = create_session()

        self.assertEqual([n.id for n in session.graph.nodes], [MASTER_NODE_ID])
        self.assertEqual(session.graph.nodes[0].kind, "MasterNode")
        self.assertEqual(session.graph.nodes[0].data, {"problem": "", "goal": "", "context": ""})
        self.assertEqual(session.graph.edges, [])
        self.assertFalse(session.busy)

    def test_default_roles_are_unselected(self) -> None:
        session = create_session()

        self.assertEqual([r.role for r in session.roles], ["🏢 CEO", "📈 Marketing Manager"])
        self.assertFalse(any(r.selected for r in session.roles))

    def test_sessions_do_not_share_graphs(self) -> None:
        first = create_session()
        second = create_session()
        first.graph = first.graph.model_copy(update={"nodes": []})

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(second.graph.nodes), 1)

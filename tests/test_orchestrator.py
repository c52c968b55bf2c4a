"""Integration tests: the analytics service end to end."""

import logging

import pytest

import netinsight
from netinsight.domain.models import CommunityType, NetworkGraph, NetworkNode
from netinsight.services.orchestrator import (
    NetworkAnalyticsService,
    contacts_fingerprint,
    graph_fingerprint,
)
from netinsight.settings import settings_from_dict
from tests.conftest import make_graph


@pytest.fixture
def service():
    return NetworkAnalyticsService()


class TestInfluence:
    def test_scores_for_every_node(self, service, barbell_graph):
        scores = service.get_influence_scores(barbell_graph)
        assert set(scores) == set(barbell_graph.nodes)
        assert all(0.0 <= v <= 100.0 for v in scores.values())
        assert max(scores, key=scores.get) in {"c", "d"}

    def test_rank_sequence(self, service, cycle_graph):
        ranked = service.rank_influence(cycle_graph)
        assert [s.rank for s in ranked] == [1, 2, 3, 4, 5]
        # all nodes tie on a regular graph: graph order is kept
        assert [s.node_id for s in ranked] == ["n1", "n2", "n3", "n4", "n5"]

    def test_module_level_api(self, path_graph):
        scores = netinsight.get_influence_scores(path_graph)
        assert scores["B"] == pytest.approx(scores["C"])
        assert scores["B"] > scores["A"]

    def test_settings_weights_applied(self, path_graph):
        settings = settings_from_dict({
            "influence": {
                "degree_weight": 1.0,
                "betweenness_weight": 0.0,
                "clustering_weight": 0.0,
                "eigenvector_weight": 0.0,
            }
        })
        service = NetworkAnalyticsService.from_settings(settings)
        scores = service.get_influence_scores(path_graph)
        assert scores["A"] == pytest.approx(25.0)
        assert scores["B"] == pytest.approx(50.0)


class TestCommunities:
    def test_acme_example(self, service, acme_graph, acme_contacts):
        report = service.get_communities(acme_graph, acme_contacts)
        by_label = {c.label: c for c in report.communities}
        acme = by_label["Acme"]
        assert acme.type is CommunityType.COMPANY
        assert acme.size == 3
        assert acme.density == 1.0
        # the structural cluster named "Acme" folded into the company community
        assert sum(1 for c in report.communities if c.key == "acme") == 1

    def test_accepts_contact_list(self, service, acme_graph, acme_contacts):
        from_map = service.get_communities(acme_graph, acme_contacts)
        from_list = service.get_communities(acme_graph, list(acme_contacts.values()))
        assert from_map.to_dict() == from_list.to_dict()

    def test_memberships_sorted(self, service, acme_graph, acme_contacts):
        report = service.get_communities(acme_graph, acme_contacts)
        counts = [len(m.communities) for m in report.memberships]
        assert counts == sorted(counts, reverse=True)
        assert report.memberships[0].contact_id == "carol"

    def test_sorted_by_size(self, service, acme_graph, acme_contacts):
        sizes = [c.size for c in service.get_communities(acme_graph, acme_contacts).communities]
        assert sizes == sorted(sizes, reverse=True)

    def test_without_contacts(self, service, barbell_graph):
        report = service.get_communities(barbell_graph)
        assert report.clusters_converged is True
        assert all(c.type is CommunityType.NETWORK_CLUSTER for c in report.communities)

    def test_non_converged_run_is_logged(self, barbell_graph, caplog):
        settings = settings_from_dict({"clustering": {"max_passes": 1}})
        service = NetworkAnalyticsService.from_settings(settings)
        with caplog.at_level(logging.WARNING):
            report = service.get_communities(barbell_graph)
        assert report.clusters_converged is False
        assert report.cluster_passes == 1
        assert "without converging" in caplog.text

    def test_idempotent_across_services(self, acme_graph, acme_contacts):
        first = NetworkAnalyticsService().get_communities(acme_graph, acme_contacts)
        second = NetworkAnalyticsService().get_communities(acme_graph, acme_contacts)
        assert first.to_dict() == second.to_dict()


class TestMetrics:
    def test_metrics(self, service, star_graph):
        m = service.get_metrics(star_graph)
        assert m.total_nodes == 5
        assert m.key_connectors[0] == "H"

    def test_key_connectors(self, service, star_graph):
        assert service.key_connectors(star_graph) == ["H"]

    def test_mutual_connections(self, service, star_graph):
        mutuals = service.mutual_connections(star_graph, "L1")
        assert {m.contact_id for m in mutuals} == {"L2", "L3", "L4"}

    def test_introduction_paths(self, service, path_graph):
        assert service.introduction_path(path_graph, "A", "C").intermediaries == ["B"]
        paths = service.introduction_paths(path_graph, "A", "D", max_paths=3)
        assert [p.path for p in paths] == [["A", "B", "C", "D"]]

    def test_introduction_path_checks_graph(self, service):
        nodes = {"a": NetworkNode("a", "A"), "b": NetworkNode("b", "B")}
        bad = NetworkGraph(nodes=nodes, adjacency={"a": frozenset({"b"}), "b": frozenset()})
        with pytest.raises(AssertionError):
            service.introduction_path(bad, "a", "b")


class TestCaching:
    def test_repeat_call_served_from_cache(self, service, barbell_graph):
        first = service.rank_influence(barbell_graph)
        entries = service.cache_info()["entries"]
        second = service.rank_influence(barbell_graph)
        assert service.cache_info()["entries"] == entries
        assert [s.to_dict() for s in first] == [s.to_dict() for s in second]

    def test_results_are_fresh_copies(self, service, barbell_graph):
        first = service.rank_influence(barbell_graph)
        first[0].rank = 99
        assert service.rank_influence(barbell_graph)[0].rank == 1

    def test_changed_graph_recomputes(self, service, path_graph):
        before = service.get_influence_scores(path_graph)
        longer = make_graph([("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")])
        after = service.get_influence_scores(longer)
        assert set(after) == {"A", "B", "C", "D", "E"}
        assert before != after

    def test_cache_bounded(self, barbell_graph, path_graph, star_graph):
        service = NetworkAnalyticsService(cache_size=2)
        for g in (barbell_graph, path_graph, star_graph):
            service.centrality(g)
        assert service.cache_info()["entries"] == 2

    def test_cache_disabled(self, barbell_graph):
        service = NetworkAnalyticsService(cache_size=0)
        service.rank_influence(barbell_graph)
        assert service.cache_info()["entries"] == 0

    def test_clear(self, service, barbell_graph):
        service.rank_influence(barbell_graph)
        service.clear_cache()
        assert service.cache_info()["entries"] == 0

    def test_fingerprint_tracks_content(self, path_graph):
        same = make_graph([("A", "B"), ("B", "C"), ("C", "D")])
        renamed = make_graph([("A", "B"), ("B", "C"), ("C", "X")])
        assert graph_fingerprint(path_graph) == graph_fingerprint(same)
        assert graph_fingerprint(path_graph) != graph_fingerprint(renamed)

    def test_contacts_fingerprint_order_independent(self, acme_contacts):
        reversed_contacts = dict(reversed(list(acme_contacts.items())))
        assert contacts_fingerprint(acme_contacts) == contacts_fingerprint(reversed_contacts)


class TestValidation:
    def test_malformed_graph_rejected(self, service):
        nodes = {"a": NetworkNode("a", "A"), "b": NetworkNode("b", "B")}
        bad = NetworkGraph(nodes=nodes, adjacency={"a": frozenset({"b"}), "b": frozenset()})
        with pytest.raises(AssertionError):
            service.get_influence_scores(bad)

    def test_validation_can_be_disabled(self):
        nodes = {"a": NetworkNode("a", "A"), "b": NetworkNode("b", "B")}
        bad = NetworkGraph(nodes=nodes, adjacency={"a": frozenset({"b"}), "b": frozenset()})
        service = NetworkAnalyticsService(validate_input=False)
        assert set(service.get_influence_scores(bad)) == {"a", "b"}

    def test_empty_graph(self, service):
        assert service.get_influence_scores(NetworkGraph()) == {}
        report = service.get_communities(NetworkGraph())
        assert report.communities == []
        assert report.memberships == []

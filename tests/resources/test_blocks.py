from dialog_facets.models import BlockConfigurations, FacetResult

from ..utils import admin_headers, make_token

BLOCKS_ENDPOINT = "/blocks"


def place_block(client, facet_id: str = "color"):
    return client.post(BLOCKS_ENDPOINT, json={"facet": facet_id}, headers=admin_headers())


def test_list_derivatives(dialog_facets_api, facet_backend):
    """Check that one block derivative is listed per facet."""
    facet_backend.add_facet("color", "Color")
    facet_backend.add_facet("size", "Size")

    client = dialog_facets_api.test_client()
    res = client.get(f"{BLOCKS_ENDPOINT}/derivatives")
    assert res.status_code == 200
    assert res.json["_meta"]["total"] == 2
    assert [d["id"] for d in res.json["_items"]] == [
        "dialog_facets_link_block:color",
        "dialog_facets_link_block:size",
    ]


def test_admin_endpoints_require_auth(dialog_facets_api, clean_db, facet_backend):
    """Check that configuring blocks requires an admin token."""
    facet_backend.add_facet("color", "Color")
    client = dialog_facets_api.test_client()

    res = client.post(BLOCKS_ENDPOINT, json={"facet": "color"})
    assert res.status_code == 401

    res = client.post(
        BLOCKS_ENDPOINT,
        json={"facet": "color"},
        headers={"Authorization": f"Bearer {make_token(role='editor')}"},
    )
    assert res.status_code == 401

    res = client.post(
        BLOCKS_ENDPOINT,
        json={"facet": "color"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert res.status_code == 401

    res = client.get(BLOCKS_ENDPOINT)
    assert res.status_code == 401


def test_place_block(dialog_facets_api, clean_db, facet_backend):
    """Check that placing a block stores its default configuration and dependencies."""
    facet_backend.add_facet("color", "Color")
    client = dialog_facets_api.test_client()

    res = place_block(client)
    assert res.status_code == 201
    assert res.json["plugin_id"] == "dialog_facets_link_block:color"
    assert res.json["derivative_id"] == "color"
    assert res.json["link_title"] == "Color"
    assert res.json["dialog_type"] == "modal"
    assert res.json["dependencies"] == {"config": ["facets.facet.color"]}
    assert res.json["_etag"]

    res = place_block(client, "nope")
    assert res.status_code == 400
    assert "nope" in res.json["_error"]["message"]

    res = client.post(BLOCKS_ENDPOINT, json={}, headers=admin_headers())
    assert res.status_code == 400

    res = client.post(BLOCKS_ENDPOINT, json={"fact": "color"}, headers=admin_headers())
    assert res.status_code == 422


def test_list_blocks(dialog_facets_api, clean_db, facet_backend):
    """Check that placed blocks can be listed and filtered by facet."""
    facet_backend.add_facet("color", "Color")
    facet_backend.add_facet("size", "Size")
    client = dialog_facets_api.test_client()
    place_block(client, "color")
    place_block(client, "color")
    place_block(client, "size")

    res = client.get(BLOCKS_ENDPOINT, headers=admin_headers())
    assert res.status_code == 200
    assert res.json["_meta"]["total"] == 3
    assert len(res.json["_items"]) == 3

    res = client.get(f"{BLOCKS_ENDPOINT}?facet=size", headers=admin_headers())
    assert res.status_code == 200
    assert res.json["_meta"]["total"] == 1
    assert res.json["_items"][0]["derivative_id"] == "size"


def test_render_block(dialog_facets_api, clean_db, facet_backend):
    """Check that a placed block renders a link only while its facet has results."""
    facet_backend.add_facet("color", "Color", results=[FacetResult("red")])
    client = dialog_facets_api.test_client()
    block_id = place_block(client).json["id"]

    res = client.get(f"{BLOCKS_ENDPOINT}/{block_id}?q=shoes")
    assert res.status_code == 200
    assert res.json["#cache"] == {"contexts": ["url.query_args"]}
    assert res.json["link"]["title"] == "Color"
    assert res.json["link"]["url"]["query"] == {"q": "shoes"}
    assert res.json["link"]["url"]["href"] == "/facet/color?q=shoes"
    assert res.json["link"]["attributes"]["data-dialog-type"] == "modal"

    facet_backend.results["color"] = []
    res = client.get(f"{BLOCKS_ENDPOINT}/{block_id}?q=shoes")
    assert res.status_code == 200
    assert res.json == {"#cache": {"contexts": ["url.query_args"]}}

    facet_backend.storage.delete("color")
    res = client.get(f"{BLOCKS_ENDPOINT}/{block_id}")
    assert res.status_code == 200
    assert res.json == {}

    res = client.get(f"{BLOCKS_ENDPOINT}/{block_id + 1}")
    assert res.status_code == 404


def test_block_form(dialog_facets_api, clean_db, facet_backend):
    """Check that a placed block's settings form can be fetched."""
    facet_backend.add_facet("color", "Color")
    client = dialog_facets_api.test_client()
    block_id = place_block(client).json["id"]

    res = client.get(f"{BLOCKS_ENDPOINT}/{block_id}/form", headers=admin_headers())
    assert res.status_code == 200
    assert res.json["link_title"]["default_value"] == "Color"
    assert res.json["dialog_type"]["default_value"] == "modal"
    assert set(res.json["dialog_type"]["options"]) == {
        "modal",
        "non_modal",
        "off_canvas",
    }


def test_submit_block_form(dialog_facets_api, clean_db, facet_backend):
    """Check that submitting the settings form updates a placed block."""
    facet_backend.add_facet("color", "Color", results=[FacetResult("red")])
    client = dialog_facets_api.test_client()
    block = place_block(client).json
    url = f"{BLOCKS_ENDPOINT}/{block['id']}"
    values = {"link_title": "Filter by color", "dialog_type": "off_canvas"}

    # An etag is required
    res = client.patch(url, json=values, headers=admin_headers())
    assert res.status_code == 428

    res = client.patch(url, json=values, headers=admin_headers(**{"If-Match": "foo"}))
    assert res.status_code == 412

    # Only the three dialog types are accepted
    res = client.patch(
        url,
        json={**values, "dialog_type": "sideways"},
        headers=admin_headers(**{"If-Match": block["_etag"]}),
    )
    assert res.status_code == 422

    res = client.patch(
        url, json=values, headers=admin_headers(**{"If-Match": block["_etag"]})
    )
    assert res.status_code == 200
    assert res.json["link_title"] == "Filter by color"
    assert res.json["dialog_type"] == "off_canvas"
    assert res.json["_etag"] != block["_etag"]

    link = client.get(url).json["link"]
    assert link["title"] == "Filter by color"
    assert link["attributes"]["data-dialog-type"] == "dialog"
    assert link["attributes"]["data-dialog-renderer"] == "off_canvas"


def test_remove_block(dialog_facets_api, clean_db, facet_backend):
    """Check that a placed block can be removed."""
    facet_backend.add_facet("color", "Color")
    client = dialog_facets_api.test_client()
    block = place_block(client).json
    url = f"{BLOCKS_ENDPOINT}/{block['id']}"

    res = client.delete(url, headers=admin_headers())
    assert res.status_code == 428

    res = client.delete(url, headers=admin_headers(**{"If-Match": block["_etag"]}))
    assert res.status_code == 204

    assert client.get(url).status_code == 404


def test_remove_facet_dependents(dialog_facets_api, clean_db, facet_backend):
    """Check that blocks depending on a deleted facet are removed."""
    facet_backend.add_facet("color", "Color")
    facet_backend.add_facet("size", "Size")
    client = dialog_facets_api.test_client()
    place_block(client, "color")
    place_block(client, "color")
    place_block(client, "size")

    res = client.delete(
        f"{BLOCKS_ENDPOINT}/dependencies/facet/color", headers=admin_headers()
    )
    assert res.status_code == 200
    assert res.json == {"_meta": {"total": 2}}

    with dialog_facets_api.app_context():
        assert [b.derivative_id for b in BlockConfigurations.list()] == ["size"]

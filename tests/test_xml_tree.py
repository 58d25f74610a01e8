import pytest

from scholar_gateway.services.xml_tree import as_list, child, parse_xml, require, text_of
from scholar_gateway.utils.errors import ResponseShapeError


def test_attributes_are_merged_without_prefix():
    tree = parse_xml('<root><link href="http://x/pdf" title="pdf" rel="related"/></root>')
    assert tree["root"]["link"] == {"href": "http://x/pdf", "title": "pdf", "rel": "related"}


def test_single_child_is_bare_and_repeated_children_are_a_list():
    single = parse_xml("<AuthorList><Author><LastName>Doe</LastName></Author></AuthorList>")
    many = parse_xml(
        "<AuthorList><Author><LastName>Doe</LastName></Author>"
        "<Author><LastName>Roe</LastName></Author></AuthorList>"
    )

    assert isinstance(single["AuthorList"]["Author"], dict)
    assert single["AuthorList"]["Author"]["LastName"] == "Doe"
    assert isinstance(many["AuthorList"]["Author"], list)
    assert [author["LastName"] for author in many["AuthorList"]["Author"]] == ["Doe", "Roe"]


def test_text_next_to_attributes_goes_under_text_key():
    tree = parse_xml('<ELocationID EIdType="doi" ValidYN="Y">10.1000/xyz</ELocationID>')
    node = tree["ELocationID"]

    assert node["EIdType"] == "doi"
    assert text_of(node) == "10.1000/xyz"


def test_known_namespaces_become_prefixes():
    tree = parse_xml(
        '<feed xmlns="http://www.w3.org/2005/Atom" '
        'xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/" '
        'xmlns:arxiv="http://arxiv.org/schemas/atom">'
        "<opensearch:totalResults>7</opensearch:totalResults>"
        "<entry><arxiv:doi>10.1/abc</arxiv:doi></entry></feed>"
    )

    assert tree["feed"]["opensearch:totalResults"] == "7"
    assert tree["feed"]["entry"]["arxiv:doi"] == "10.1/abc"


def test_mixed_content_keeps_full_text():
    tree = parse_xml("<ArticleTitle>Role of <i>TP53</i> in tumours.</ArticleTitle>")
    assert text_of(tree["ArticleTitle"]) == "Role of TP53 in tumours."


def test_text_wholly_inside_inline_markup_is_kept():
    title = parse_xml("<ArticleTitle><i>Drosophila melanogaster</i></ArticleTitle>")
    abstract = parse_xml('<AbstractText Label="RESULTS"><b>Flies <i>fly</i>.</b></AbstractText>')

    assert text_of(title["ArticleTitle"]) == "Drosophila melanogaster"
    assert text_of(abstract["AbstractText"]) == "Flies fly."
    assert abstract["AbstractText"]["Label"] == "RESULTS"


def test_element_with_blank_children_has_no_text_key():
    tree = parse_xml("<Abstract><AbstractText/></Abstract>")
    assert "#text" not in tree["Abstract"]


def test_empty_element_is_empty_string():
    tree = parse_xml("<eSearchResult><IdList/></eSearchResult>")
    assert tree["eSearchResult"]["IdList"] == ""
    assert as_list(child(tree, "eSearchResult", "IdList", "Id")) == []


@pytest.mark.parametrize("node, expected", [
    (None, []),
    ("", []),
    ({"a": "1"}, [{"a": "1"}]),
    ("12345", ["12345"]),
    ([1, 2], [1, 2]),
])
def test_as_list(node, expected):
    assert as_list(node) == expected


def test_malformed_xml_is_a_shape_fault():
    with pytest.raises(ResponseShapeError):
        parse_xml("<feed><entry></feed>")


def test_require_reports_missing_path():
    with pytest.raises(ResponseShapeError, match="MedlineCitation/Article"):
        require({"MedlineCitation": {"PMID": "1"}}, "MedlineCitation", "Article")

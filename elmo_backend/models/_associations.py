from sqlalchemy import Column, ForeignKey, Integer, Table, UniqueConstraint

from elmo_backend.models.base import Base


def _link_table(name: str, left: tuple[str, str], right: tuple[str, str]) -> Table:
    left_column, left_target = left
    right_column, right_target = right
    return Table(
        name,
        Base.metadata,
        Column(
            left_column,
            Integer,
            ForeignKey(f"{left_target}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column(
            right_column,
            Integer,
            ForeignKey(f"{right_target}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )


resource_has_author = _link_table(
    "Resource_has_Author",
    ("resource_id", "Resource"),
    ("author_id", "Author"),
)

resource_has_contributor_person = _link_table(
    "Resource_has_Contributor_Person",
    ("resource_id", "Resource"),
    ("contributor_person_id", "Contributor_Person"),
)

resource_has_contributor_institution = _link_table(
    "Resource_has_Contributor_Institution",
    ("resource_id", "Resource"),
    ("contributor_institution_id", "Contributor_Institution"),
)

resource_has_contact_person = _link_table(
    "Resource_has_Contact_Person",
    ("resource_id", "Resource"),
    ("contact_person_id", "Contact_Person"),
)

resource_has_funding_reference = _link_table(
    "Resource_has_Funding_Reference",
    ("resource_id", "Resource"),
    ("funding_reference_id", "Funding_Reference"),
)

resource_has_originating_laboratory = _link_table(
    "Resource_has_Originating_Laboratory",
    ("resource_id", "Resource"),
    ("originating_laboratory_id", "Originating_Laboratory"),
)

resource_has_related_work = _link_table(
    "Resource_has_Related_Work",
    ("resource_id", "Resource"),
    ("related_work_id", "Related_Work"),
)

resource_has_spatial_temporal_coverage = _link_table(
    "Resource_has_Spatial_Temporal_Coverage",
    ("resource_id", "Resource"),
    ("spatial_temporal_coverage_id", "Spatial_Temporal_Coverage"),
)

resource_has_thesaurus_keywords = _link_table(
    "Resource_has_Thesaurus_Keywords",
    ("resource_id", "Resource"),
    ("thesaurus_keywords_id", "Thesaurus_Keywords"),
)

resource_has_free_keywords = _link_table(
    "Resource_has_Free_Keywords",
    ("resource_id", "Resource"),
    ("free_keywords_id", "Free_Keywords"),
)

# one GGM_Properties row per resource
resource_has_ggm_properties = _link_table(
    "Resource_has_GGM_Properties",
    ("resource_id", "Resource"),
    ("ggm_properties_id", "GGM_Properties"),
)
resource_has_ggm_properties.append_constraint(UniqueConstraint("resource_id"))

author_has_affiliation = _link_table(
    "Author_has_Affiliation",
    ("author_id", "Author"),
    ("affiliation_id", "Affiliation"),
)

contributor_person_has_affiliation = _link_table(
    "Contributor_Person_has_Affiliation",
    ("contributor_person_id", "Contributor_Person"),
    ("affiliation_id", "Affiliation"),
)

contributor_institution_has_affiliation = _link_table(
    "Contributor_Institution_has_Affiliation",
    ("contributor_institution_id", "Contributor_Institution"),
    ("affiliation_id", "Affiliation"),
)

contributor_person_has_role = _link_table(
    "Contributor_Person_has_Role",
    ("contributor_person_id", "Contributor_Person"),
    ("role_id", "Role"),
)

contributor_institution_has_role = _link_table(
    "Contributor_Institution_has_Role",
    ("contributor_institution_id", "Contributor_Institution"),
    ("role_id", "Role"),
)

# links removed when a resource is resubmitted under the same DOI
RESOURCE_CHILD_LINKS = (
    resource_has_author,
    resource_has_contributor_person,
    resource_has_contributor_institution,
    resource_has_contact_person,
    resource_has_funding_reference,
    resource_has_originating_laboratory,
    resource_has_related_work,
    resource_has_spatial_temporal_coverage,
    resource_has_thesaurus_keywords,
    resource_has_free_keywords,
)

"""GraphQL documents for the reputation protocol indexer."""

# Position list cap per vault on trust triples
TRIPLE_POSITIONS_LIMIT = 30
TRUSTED_CIRCLE_POSITIONS_LIMIT = 200
CLAIMS_ABOUT_ATOM_LIMIT = 20
CLAIM_POSITIONS_LIMIT = 20

_ATOM_FIELDS = """
    term_id
    type
    label
    image
    data
    emoji
    creator_id
"""

ADDRESS_ATOMS_QUERY = f"""
query AddressAtoms($plainAddress: String!, $caipAddress: String!) {{
  plainAtoms: atoms(
    where: {{ _or: [{{ label: {{ _ilike: $plainAddress }} }}, {{ data: {{ _ilike: $plainAddress }} }}] }},
    order_by: {{ term: {{ total_market_cap: desc_nulls_last }} }},
    limit: 1
  ) {{{_ATOM_FIELDS}}}
  caipAtoms: atoms(
    where: {{ _or: [{{ label: {{ _ilike: $caipAddress }} }}, {{ data: {{ _ilike: $caipAddress }} }}] }},
    order_by: {{ term: {{ total_market_cap: desc_nulls_last }} }},
    limit: 1
  ) {{{_ATOM_FIELDS}}}
}}
"""

ORIGIN_ATOM_QUERY = f"""
query OriginAtom($originUrl: String!) {{
  atoms(
    where: {{ _or: [{{ label: {{ _ilike: $originUrl }} }}, {{ data: {{ _ilike: $originUrl }} }}] }},
    order_by: {{ term: {{ total_market_cap: desc_nulls_last }} }},
    limit: 1
  ) {{{_ATOM_FIELDS}}}
}}
"""

_AGGREGATE_FIELDS = """
      aggregate {
        count
        sum { shares }
        avg { shares }
      }
"""

TRIPLE_WITH_POSITIONS_QUERY = f"""
query TripleWithPositionAggregates($subjectId: String!, $predicateId: String!, $objectId: String!, $userAddress: String!) {{
  triples(where: {{
    subject_id: {{ _eq: $subjectId }},
    predicate_id: {{ _eq: $predicateId }},
    object_id: {{ _eq: $objectId }}
  }}) {{
    term_id
    subject_id
    predicate_id
    object_id
    counter_term_id
    term {{ vaults(where: {{ curve_id: {{ _eq: "1" }} }}) {{ term_id market_cap position_count }} }}
    counter_term {{ vaults(where: {{ curve_id: {{ _eq: "1" }} }}) {{ term_id market_cap position_count }} }}
    positions_aggregate {{{_AGGREGATE_FIELDS}}}
    counter_positions_aggregate {{{_AGGREGATE_FIELDS}}}
    positions(order_by: {{ shares: desc }}, limit: {TRIPLE_POSITIONS_LIMIT}) {{
      account_id
      shares
      account {{ id label }}
    }}
    counter_positions(order_by: {{ shares: desc }}, limit: {TRIPLE_POSITIONS_LIMIT}) {{
      account_id
      shares
      account {{ id label }}
    }}
    user_position: positions(where: {{ account_id: {{ _ilike: $userAddress }} }}) {{ account_id shares }}
    user_counter_position: counter_positions(where: {{ account_id: {{ _ilike: $userAddress }} }}) {{ account_id shares }}
  }}
}}
"""

# Path is positions -> term -> triple; term is the unified atom/triple view.
USER_TRUSTED_CIRCLE_QUERY = f"""
query UserTrustedCircle($userAddress: String!, $predicateId: String!, $objectId: String!) {{
  positions(
    where: {{
      account_id: {{ _ilike: $userAddress }},
      term: {{ triple: {{ predicate_id: {{ _eq: $predicateId }}, object_id: {{ _eq: $objectId }} }} }}
    }},
    order_by: {{ shares: desc }},
    limit: {TRUSTED_CIRCLE_POSITIONS_LIMIT}
  ) {{
    term {{
      triple {{
        subject_id
        subject {{ label data }}
      }}
    }}
  }}
}}
"""

ATOMS_FOR_ADDRESSES_QUERY = """
query AtomsForAddresses($addresses: [String!]!) {
  atoms(where: { _or: [{ label: { _in: $addresses } }, { data: { _in: $addresses } }] }) {
    term_id
    label
    data
    image
  }
}
"""

ALL_CLAIMS_ABOUT_ATOM_QUERY = f"""
query AllClaimsAboutAtom($subjectId: String!, $excludePredicateId: String!, $excludeObjectId: String!) {{
  triples(
    where: {{
      subject_id: {{ _eq: $subjectId }},
      _not: {{ _and: [{{ predicate_id: {{ _eq: $excludePredicateId }} }}, {{ object_id: {{ _eq: $excludeObjectId }} }}] }}
    }},
    order_by: {{ triple_term: {{ total_market_cap: desc_nulls_last }} }},
    limit: {CLAIMS_ABOUT_ATOM_LIMIT}
  ) {{
    term_id
    predicate_id
    object_id
    predicate {{ label }}
    object {{ label }}
    positions(order_by: {{ shares: desc }}, limit: {CLAIM_POSITIONS_LIMIT}) {{ account_id shares }}
    counter_positions(order_by: {{ shares: desc }}, limit: {CLAIM_POSITIONS_LIMIT}) {{ account_id shares }}
  }}
}}
"""

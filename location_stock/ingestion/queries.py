"""GraphQL documents sent to the Admin API."""

from __future__ import annotations

from ..config import constants

VARIANT_INVENTORY_WITH_CONFIG = f"""
query VariantInventoryWithConfig($id: ID!, $namespace: String!, $key: String!) {{
  productVariant(id: $id) {{
    id
    title
    inventoryItem {{
      id
      inventoryLevels(first: {constants.INVENTORY_LEVELS_PAGE_SIZE}) {{
        edges {{
          node {{
            id
            location {{
              id
              name
              fulfillsOnlineOrders
              localPickupSettingsV2 {{
                pickupTime
              }}
              address {{
                address1
                address2
                city
                province
                zip
                country
              }}
            }}
            quantities(names: "available") {{
              name
              quantity
            }}
          }}
        }}
      }}
    }}
  }}
  shop {{
    metafield(namespace: $namespace, key: $key) {{
      value
    }}
  }}
}}
"""

DELIVERY_PROFILES_FOR_LOCATIONS = f"""
query DeliveryProfilesForLocations {{
  deliveryProfiles(first: {constants.DELIVERY_PROFILES_PAGE_SIZE}) {{
    nodes {{
      profileLocationGroups {{
        locationGroup {{
          locations(first: {constants.LOCATIONS_PAGE_SIZE}) {{
            nodes {{
              id
            }}
          }}
        }}
        locationGroupZones(first: 30) {{
          nodes {{
            zone {{
              name
            }}
            methodDefinitions(first: 50) {{
              nodes {{
                active
                name
                rateProvider {{
                  __typename
                }}
              }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

LOCATIONS_AND_CONFIG = f"""
query LocationsAndConfig($namespace: String!, $key: String!) {{
  shop {{
    id
    metafield(namespace: $namespace, key: $key) {{
      value
    }}
  }}
  locations(first: {constants.LOCATIONS_PAGE_SIZE}) {{
    nodes {{
      id
      name
      fulfillsOnlineOrders
      localPickupSettingsV2 {{
        pickupTime
      }}
    }}
  }}
}}
"""

LOCATION_STOCK_CONFIG = """
query LocationStockConfig($namespace: String!, $key: String!) {
  shop {
    id
    metafield(namespace: $namespace, key: $key) {
      value
    }
  }
}
"""

SET_LOCATION_STOCK_CONFIG = """
mutation SetLocationStockConfig($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields {
      id
      namespace
      key
    }
    userErrors {
      field
      message
    }
  }
}
"""

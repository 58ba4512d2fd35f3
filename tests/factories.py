"""Wizard-shaped payload builders shared by the test modules."""


def make_product(product_id="p1", pieces=None, **fields):
    """A selectedProducts entry in the wizard's JSON shape."""
    product = {
        "id": product_id,
        "productType": "Kitchen Top",
        "quantity": 1,
        "materialSource": "yourself",
        "pieces": pieces if pieces is not None else {},
    }
    product.update(fields)
    return product


def make_pieces(*dimensions):
    """make_pieces(("2", "1"), ("1", "0.5")) -> {"piece-1": {...}, "piece-2": {...}}"""
    return {
        f"piece-{i}": {"length": length, "width": width, "thickness": "20mm"}
        for i, (length, width) in enumerate(dimensions, start=1)
    }


def luxone_product(product_id="p1", color="Golden River", pieces=None, **fields):
    return make_product(
        product_id,
        pieces=pieces,
        materialSource="luxone",
        materialType="quartz",
        materialColor=color,
        **fields,
    )

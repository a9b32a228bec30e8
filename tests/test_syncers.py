from datetime import datetime, timezone

from sqlalchemy import select

from db.models import (
    AttributeValue, ProductMedia, ProductOnline, ProductVariant, Tag,
    ProductVariantAttribute, product_concerns, product_tags,
)
from import_engine.lookups import AttributeLookup, ConcernLookup, TagLookup
from import_engine.rows import MasterGroup, MasterVariantRow
from import_engine.sync import (
    ProductConcernSyncer, ProductMediaSyncer, ProductOnlineEnsurer,
    ProductTagSyncer, ProductUpserter, VariantAttributeSyncer, VariantUpserter,
)
from services.pivot_meta import PivotMeta, resolve_pivot_meta
from tests.factories import (
    BrandFactory, CategoryTypeFactory, ProductFactory, ProductMediaFactory,
    ProductOnlineFactory, ProductVariantFactory,
)

NOW = datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc)


def _tag_ids(session, product_id):
    rows = session.execute(
        select(product_tags.c.tag_id).where(product_tags.c.product_id == product_id)
    )
    return sorted(r[0] for r in rows)


# ── Media ──────────────────────────────────────────────────────────────

def test_media_append_only(db_session):
    product = ProductFactory()
    ProductMediaFactory(product=product, url="https://cdn/a.jpg")

    added = ProductMediaSyncer().sync(
        db_session, product.id,
        ["https://cdn/a.jpg", "https://cdn/b.jpg", "https://cdn/b.jpg", " ", "https://cdn/c.jpg"],
        alt_text=product.name,
    )

    assert added == 2
    urls = [m.url for m in db_session.query(ProductMedia).filter_by(product_id=product.id).order_by(ProductMedia.id)]
    assert urls == ["https://cdn/a.jpg", "https://cdn/b.jpg", "https://cdn/c.jpg"]


def test_media_nothing_new(db_session):
    product = ProductFactory()
    ProductMediaFactory(product=product, url="https://cdn/a.jpg")

    assert ProductMediaSyncer().sync(db_session, product.id, ["https://cdn/a.jpg"]) == 0
    assert ProductMediaSyncer().sync(db_session, product.id, []) == 0


def test_media_same_url_on_other_product_still_inserted(db_session):
    other = ProductMediaFactory(url="https://cdn/shared.jpg")
    product = ProductFactory()

    assert ProductMediaSyncer().sync(db_session, product.id, [other.url]) == 1


# ── Online ─────────────────────────────────────────────────────────────

def test_online_inserted_once(db_session):
    product = ProductFactory()
    ensurer = ProductOnlineEnsurer()

    assert ensurer.ensure(db_session, product.id) is True
    assert ensurer.ensure(db_session, product.id) is False
    assert db_session.query(ProductOnline).filter_by(product_id=product.id).count() == 1


def test_online_existing_row_kept(db_session):
    product = ProductFactory()
    ProductOnlineFactory(product=product, is_active=False)

    assert ProductOnlineEnsurer().ensure(db_session, product.id) is False
    assert db_session.query(ProductOnline).one().is_active is False


# ── Tags ───────────────────────────────────────────────────────────────

def test_tags_replaced_not_merged(db_session):
    product = ProductFactory()
    syncer = ProductTagSyncer(TagLookup())
    pivot = resolve_pivot_meta(db_session)

    assert syncer.sync(db_session, product.id, "New|Sale", pivot, NOW) == 2
    assert syncer.sync(db_session, product.id, "Sale|Organic|Sale", pivot, NOW) == 2

    ids = _tag_ids(db_session, product.id)
    names = {t.name for t in db_session.query(Tag).filter(Tag.id.in_(ids))}
    assert names == {"Sale", "Organic"}


def test_tags_fill_timestamp_columns(db_session):
    product = ProductFactory()
    ProductTagSyncer(TagLookup()).sync(
        db_session, product.id, "Promo", resolve_pivot_meta(db_session), NOW,
    )

    row = db_session.execute(
        select(product_tags).where(product_tags.c.product_id == product.id)
    ).one()
    assert row.created_at == NOW.replace(tzinfo=None)
    assert row.start_date is None
    assert row.deleted_at is None


def test_tags_empty_cell_clears(db_session):
    product = ProductFactory()
    syncer = ProductTagSyncer(TagLookup())
    pivot = resolve_pivot_meta(db_session)
    syncer.sync(db_session, product.id, "A|B", pivot, NOW)

    assert syncer.sync(db_session, product.id, "", pivot, NOW) == 0
    assert _tag_ids(db_session, product.id) == []


def test_tags_skipped_when_pivot_unusable(db_session):
    product = ProductFactory()

    assert ProductTagSyncer(TagLookup()).sync(db_session, product.id, "A", PivotMeta(), NOW) == 0
    assert _tag_ids(db_session, product.id) == []


# ── Concerns ───────────────────────────────────────────────────────────

def test_concerns_replaced(db_session):
    product = ProductFactory()
    syncer = ProductConcernSyncer(ConcernLookup())
    pivot = resolve_pivot_meta(db_session)

    assert syncer.sync(db_session, product.id, "Acne", "Jerawat|Komedo", pivot) == 2
    assert syncer.sync(db_session, product.id, "Dull Skin", "", pivot) == 1

    rows = db_session.execute(
        select(product_concerns.c.concern_option_id).where(product_concerns.c.product_id == product.id)
    ).all()
    assert len(rows) == 1


def test_concerns_skipped_when_pivot_unusable(db_session):
    product = ProductFactory()

    assert ProductConcernSyncer(ConcernLookup()).sync(db_session, product.id, "Acne", "", PivotMeta()) == 0


# ── Product upsert ─────────────────────────────────────────────────────

def test_product_created_with_unique_slug(db_session):
    cat = CategoryTypeFactory()
    ProductFactory(slug="glow-serum")
    group = MasterGroup(product_name="Glow Serum", master_sku="GS-01", status="Draft", base_price=89000)

    product, created = ProductUpserter().upsert(db_session, group, category_type_id=cat.id)

    assert created is True
    assert product.slug == "glow-serum-2"
    assert product.status == "draft"
    assert product.master_sku == "GS-01"
    assert product.base_price == 89000


def test_product_matched_by_master_sku_then_name(db_session):
    cat = CategoryTypeFactory()
    by_sku = ProductFactory(name="Old Name", master_sku="SKU-1")
    by_name = ProductFactory(name="Toner Calm")
    upserter = ProductUpserter()

    p1, c1 = upserter.upsert(db_session, MasterGroup(product_name="New Name", master_sku="SKU-1"),
                             category_type_id=cat.id)
    p2, c2 = upserter.upsert(db_session, MasterGroup(product_name="Toner Calm", master_sku="SKU-9"),
                             category_type_id=cat.id)

    assert (p1.id, c1) == (by_sku.id, False)
    assert p1.name == "New Name"
    assert (p2.id, c2) == (by_name.id, False)


def test_product_update_keeps_values_missing_from_csv(db_session):
    cat = CategoryTypeFactory()
    brand = BrandFactory()
    existing = ProductFactory(master_sku="M-1", base_price=50000, status="war",
                              brand_id=brand.id, how_to_use="Apply twice")

    product, created = ProductUpserter().upsert(
        db_session, MasterGroup(product_name="Renamed", master_sku="M-1"),
        category_type_id=cat.id, brand_id=None,
    )

    assert created is False
    assert product.id == existing.id
    assert product.category_type_id == cat.id
    assert product.base_price == 50000
    assert product.status == "war"
    assert product.brand_id == brand.id
    assert product.how_to_use == "Apply twice"


# ── Variants ───────────────────────────────────────────────────────────

def test_variants_created_and_photo_alt_text(db_session):
    product = ProductFactory(name="Lip Tint")
    rows = [
        MasterVariantRow(row_no=2, variant_name="Cherry", sku1="LT-1", sku2="8990001", stock=5,
                         price=45000, photo="https://cdn/cherry.jpg"),
        MasterVariantRow(row_no=3, variant_name="Peach", sku1="LT-2", sku2="8990002", stock=0),
    ]

    items, created, media = VariantUpserter(ProductMediaSyncer()).upsert(
        db_session, product.id, product.name, rows, group_base_price=40000,
    )

    assert created == 2
    assert media == 1
    assert [name for _, name in items] == ["Cherry", "Peach"]
    assert [v.price for v, _ in items] == [45000, 40000]
    assert db_session.query(ProductMedia).one().alt_text == "Lip Tint - Cherry"


def test_variant_matched_by_barcode_moves_product(db_session):
    old = ProductVariantFactory(barcode="8991111", sku="OLD", price=1000, stock=1)
    product = ProductFactory()
    row = MasterVariantRow(row_no=2, sku1="NEW", sku2="8991111", stock=7, base_price=2500)

    items, created, _ = VariantUpserter(ProductMediaSyncer()).upsert(
        db_session, product.id, product.name, [row],
    )

    assert created == 0
    variant = items[0][0]
    assert variant.id == old.id
    assert variant.product_id == product.id
    assert variant.sku == "NEW"
    assert variant.stock == 7
    assert variant.price == 2500


def test_variant_matched_by_sku_when_barcode_unknown(db_session):
    old = ProductVariantFactory(barcode="111", sku="SKU-X")
    row = MasterVariantRow(row_no=2, sku1="SKU-X", sku2="222", price=10)

    items, created, _ = VariantUpserter(ProductMediaSyncer()).upsert(
        db_session, old.product_id, "P", [row],
    )

    assert created == 0
    assert items[0][0].id == old.id
    assert items[0][0].barcode == "222"
    assert db_session.query(ProductVariant).count() == 1


# ── Variant attribute ──────────────────────────────────────────────────

def test_variant_attribute_upsert_and_join(db_session):
    variant = ProductVariantFactory()
    attr_id = AttributeLookup().ensure_variant_attribute_id(db_session)
    syncer = VariantAttributeSyncer()

    assert syncer.upsert_value(db_session, attr_id, variant.id, "Cherry") is True

    av = db_session.query(AttributeValue).one()
    av.deleted_at = NOW
    db_session.flush()

    assert syncer.upsert_value(db_session, attr_id, variant.id, "Peach") is False

    av = db_session.query(AttributeValue).one()
    assert av.value == "Peach"
    assert av.deleted_at is None
    link = db_session.query(ProductVariantAttribute).one()
    assert (link.product_variant_id, link.attribute_value_id) == (variant.id, av.id)


def test_variants_sharing_sku_with_different_barcodes_stay_separate(db_session):
    product = ProductFactory(name="Lip Tint")
    rows = [
        MasterVariantRow(row_no=2, variant_name="Cherry", sku1="LT-SKU", sku2="8990001", stock=4),
        MasterVariantRow(row_no=3, variant_name="Peach", sku1="LT-SKU", sku2="8990002", stock=6),
    ]

    items, created, _ = VariantUpserter(ProductMediaSyncer()).upsert(
        db_session, product.id, product.name, rows, group_base_price=40000,
    )

    assert created == 2
    assert items[0][0] is not items[1][0]
    stored = sorted((v.barcode, v.stock) for v in db_session.query(ProductVariant))
    assert stored == [("8990001", 4), ("8990002", 6)]

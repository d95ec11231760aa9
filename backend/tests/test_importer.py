from stackmarks.schemas import ImportStrategy
from stackmarks.services import HierarchyStore, import_from_netscape

NESTED = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<DL><p>
    <DT><H3>Dev</H3>
    <DL><p>
        <DT><H3>Python</H3>
        <DL><p>
            <DT><A HREF="https://direct.example/">Direct</A>
            <DT><H3>Libraries</H3>
            <DL><p>
                <DT><A HREF="https://a.example/">A</A>
                <DT><A HREF="https://b.example/">B</A>
                <DT><H3>Deeper</H3>
                <DL><p>
                    <DT><A HREF="https://c.example/">C</A>
                </DL><p>
            </DL><p>
        </DL><p>
    </DL><p>
</DL><p>
"""


async def _folder_titles(store):
    workspace = await store.first_workspace()
    return [f.title for f in await store.list_folders(workspace.id)]


async def _group(store, folder_title, group_title):
    workspace = await store.first_workspace()
    folder = next(f for f in await store.list_folders(workspace.id) if f.title == folder_title)
    return next(g for g in await store.list_groups(folder.id) if g.title == group_title)


async def test_flatten_puts_deep_bookmarks_in_group(db, store, user):
    result = await import_from_netscape(db, user.id, NESTED, strategy=ImportStrategy.FLATTEN)

    assert result.folders_created == 1
    assert result.groups_created == 1
    assert result.bookmarks_created == 4
    assert result.bookmarks_skipped == 0
    assert result.warnings == []

    assert await _folder_titles(store) == ["Main", "Dev"]
    group = await _group(store, "Dev", "Python")
    bookmarks = await store.list_bookmarks(group.id)
    assert [b.title for b in bookmarks] == ["Direct", "A", "B", "C"]
    assert [b.position for b in bookmarks] == [0, 1, 2, 3]


async def test_skip_drops_deep_bookmarks_with_warning(db, store, user):
    result = await import_from_netscape(db, user.id, NESTED, strategy=ImportStrategy.SKIP)

    assert result.bookmarks_created == 1
    assert result.bookmarks_skipped == 3
    assert result.warnings == ['Skipped 3 bookmarks in nested folder "Libraries"']

    group = await _group(store, "Dev", "Python")
    assert [b.title for b in await store.list_bookmarks(group.id)] == ["Direct"]


async def test_root_moves_deep_folders_to_import_folder(db, store, user):
    result = await import_from_netscape(
        db, user.id, NESTED, strategy=ImportStrategy.ROOT, root_folder_name="From Browser"
    )

    assert result.folders_created == 2
    assert result.groups_created == 2
    assert result.bookmarks_created == 4

    assert await _folder_titles(store) == ["Main", "Dev", "From Browser"]
    group = await _group(store, "Dev", "Python")
    assert [b.title for b in await store.list_bookmarks(group.id)] == ["Direct"]
    overflow = await _group(store, "From Browser", "Libraries")
    assert [b.title for b in await store.list_bookmarks(overflow.id)] == ["A", "B", "C"]


async def test_root_reuses_existing_import_folder(db, store, user):
    await import_from_netscape(db, user.id, NESTED, strategy=ImportStrategy.ROOT)
    result = await import_from_netscape(db, user.id, NESTED, strategy=ImportStrategy.ROOT)

    # 第二次只新建 "Dev" 文件夹和其下分组，导入文件夹与其中的分组复用
    assert result.folders_created == 1
    assert result.groups_created == 1
    assert await _folder_titles(store) == ["Main", "Dev", "Imported Bookmarks", "Dev"]
    overflow = await _group(store, "Imported Bookmarks", "Libraries")
    assert len(await store.list_bookmarks(overflow.id)) == 6


async def test_root_level_bookmark_is_skipped(db, store, user):
    html = """<DL><p>
    <DT><A HREF="https://loose.example/">Loose</A>
    <DT><H3>Kept</H3>
    <DL><p>
        <DT><H3>G</H3>
        <DL><p><DT><A HREF="https://kept.example/">Kept link</A></DL><p>
    </DL><p>
</DL><p>"""
    result = await import_from_netscape(db, user.id, html)

    assert result.bookmarks_created == 1
    assert result.bookmarks_skipped == 1
    assert result.warnings == ['Bookmark "Loose" at root level, skipping']


async def test_direct_folder_bookmarks_go_to_unsorted(db, store, user):
    html = """<DL><p>
    <DT><H3>Reading</H3>
    <DL><p>
        <DT><A HREF="https://one.example/">One</A>
        <DT><H3>Later</H3>
        <DL><p><DT><A HREF="https://later.example/">Later</A></DL><p>
        <DT><A HREF="https://two.example/">Two</A>
    </DL><p>
</DL><p>"""
    result = await import_from_netscape(db, user.id, html)

    assert result.groups_created == 2
    unsorted = await _group(store, "Reading", "Unsorted")
    assert [b.title for b in await store.list_bookmarks(unsorted.id)] == ["One", "Two"]
    assert unsorted.position == 0


async def test_page_is_transparent_and_tab_book_is_a_folder(db, store, user):
    html = """<DL><p>
    <DT><H3 PAGE="true">Start</H3>
    <DL><p>
        <DT><H3 BOOKMARKS="true">Session</H3>
        <DL><p>
            <DT><H3>Tabs</H3>
            <DL><p><DT><A HREF="https://tab.example/">Tab</A></DL><p>
        </DL><p>
    </DL><p>
</DL><p>"""
    result = await import_from_netscape(db, user.id, html)

    assert result.folders_created == 1
    assert await _folder_titles(store) == ["Main", "Session"]
    group = await _group(store, "Session", "Tabs")
    assert [b.url for b in await store.list_bookmarks(group.id)] == ["https://tab.example/"]


async def test_blank_titles_fall_back(db, store, user):
    html = """<DL><p>
    <DT><H3></H3>
    <DL><p>
        <DT><H3>G</H3>
        <DL><p><DT><A HREF="https://notitle.example/"></A></DL><p>
    </DL><p>
</DL><p>"""
    await import_from_netscape(db, user.id, html)

    group = await _group(store, "Untitled", "G")
    bookmark = (await store.list_bookmarks(group.id))[0]
    assert bookmark.title == "https://notitle.example/"
    assert bookmark.description == ""
    assert bookmark.tag_names == []


async def test_failed_bookmark_does_not_abort_import(db, store, user):
    long_url = "https://long.example/" + "x" * 2100
    html = f"""<DL><p>
    <DT><H3>F</H3>
    <DL><p>
        <DT><H3>G</H3>
        <DL><p>
            <DT><A HREF="https://before.example/">Before</A>
            <DT><A HREF="{long_url}">Too long</A>
            <DT><A HREF="https://after.example/">After</A>
        </DL><p>
    </DL><p>
</DL><p>"""
    result = await import_from_netscape(db, user.id, html)

    assert result.bookmarks_created == 2
    assert result.bookmarks_skipped == 1
    assert result.warnings[0].startswith('Failed to import bookmark "Too long"')

    group = await _group(store, "F", "G")
    bookmarks = await store.list_bookmarks(group.id)
    assert [b.title for b in bookmarks] == ["Before", "After"]
    assert [b.position for b in bookmarks] == [0, 1]


async def test_creates_workspace_when_user_has_none(db, store, user):
    workspace = await store.first_workspace()
    await store.delete_workspace(workspace.id)

    result = await import_from_netscape(db, user.id, NESTED)

    workspaces = await store.list_workspaces()
    assert [w.title for w in workspaces] == ["Imported"]
    assert result.bookmarks_created == 4


async def test_empty_document_imports_nothing(db, user):
    result = await import_from_netscape(db, user.id, "<html>no bookmarks</html>")
    assert result.folders_created == result.groups_created == result.bookmarks_created == 0


async def test_import_targets_first_workspace_by_position(db, store, user):
    personal = await store.first_workspace()
    second = await store.create_workspace("Second")
    await store.reorder_workspaces([second.id, personal.id])

    await import_from_netscape(db, user.id, NESTED)

    assert [f.title for f in await store.list_folders(second.id)] == ["Dev"]
    assert [f.title for f in await store.list_folders(personal.id)] == ["Main"]


async def test_importer_uses_user_scope(db, user, other_user):
    await import_from_netscape(db, other_user.id, NESTED)
    alice = HierarchyStore(db, user.id)
    assert await _folder_titles(alice) == ["Main"]


async def test_very_deep_document_imports_with_flatten(db, store, user):
    depth = 2000
    html = "<DL>" + "<DT><H3>f</H3><DL>" * depth + '<DT><A HREF="http://x.example/">Deep</A>' + "</DL>" * (depth + 1)

    result = await import_from_netscape(db, user.id, html, strategy=ImportStrategy.FLATTEN)

    assert result.folders_created == 1
    assert result.groups_created == 1
    assert result.bookmarks_created == 1
    group = await _group(store, "f", "f")
    assert [b.title for b in await store.list_bookmarks(group.id)] == ["Deep"]


async def test_deeply_nested_pages_stay_transparent(db, store, user):
    depth = 1500
    html = (
        "<DL>"
        + '<DT><H3 PAGE="true">p</H3><DL>' * depth
        + '<DT><H3>Inside</H3><DL><DT><H3>G</H3><DL><DT><A HREF="http://x.example/">X</A></DL></DL>'
        + "</DL>" * (depth + 1)
    )

    result = await import_from_netscape(db, user.id, html)

    assert result.folders_created == 1
    assert await _folder_titles(store) == ["Main", "Inside"]

def test_create_group_owned_by_member(client, create_member):
    m = create_member()
    r = client.post(f"/api/stock-groups/member/{m['id']}", json={'name': 'Tech', 'description': 'chips'})
    assert r.status_code == 201
    g = r.json()
    assert g['memberId'] == m['id']
    assert g['name'] == 'Tech'
    assert g['description'] == 'chips'
    assert g['stocks'] == []
    assert g['creationDate'] and g['lastUpdatedDate']


def test_group_names_are_unique_across_members(client, create_member, create_group):
    a = create_member()
    b = create_member()
    create_group(a['id'], 'Tech')
    r = client.post(f"/api/stock-groups/member/{b['id']}", json={'name': 'Tech'})
    assert r.status_code == 409
    # the name check happens before the member lookup
    r = client.post('/api/stock-groups/member/999', json={'name': 'Tech'})
    assert r.status_code == 409


def test_create_group_for_missing_member_is_404(client):
    r = client.post('/api/stock-groups/member/999', json={'name': 'Orphan'})
    assert r.status_code == 404
    assert client.get('/api/stock-groups').json() == []


def test_get_list_and_search_groups(client, create_member, create_group):
    m = create_member()
    g1 = create_group(m['id'], 'Tech')
    g2 = create_group(m['id'], 'Green')
    assert [g['id'] for g in client.get('/api/stock-groups').json()] == [g1['id'], g2['id']]
    assert client.get(f"/api/stock-groups/{g1['id']}").json() == g1
    assert client.get('/api/stock-groups/999').status_code == 404
    assert client.get('/api/stock-groups/search/name', params={'name': 'Green'}).json()['id'] == g2['id']
    assert client.get('/api/stock-groups/search/name', params={'name': 'green'}).status_code == 404


def test_update_group(client, create_member, create_group):
    m = create_member()
    g = create_group(m['id'], 'Tech')
    create_group(m['id'], 'Green')
    r = client.put(f"/api/stock-groups/{g['id']}", json={'name': 'Tech', 'description': 'same name is fine'})
    assert r.status_code == 200
    r = client.put(f"/api/stock-groups/{g['id']}", json={'name': 'Chips', 'description': 'renamed'})
    assert r.status_code == 200
    got = client.get(f"/api/stock-groups/{g['id']}").json()
    assert got['name'] == 'Chips'
    assert got['description'] == 'renamed'
    assert got['memberId'] == m['id']
    assert client.put(f"/api/stock-groups/{g['id']}", json={'name': 'Green'}).status_code == 409
    assert client.put('/api/stock-groups/999', json={'name': 'Nope'}).status_code == 404


def test_delete_group(client, create_member, create_group):
    m = create_member()
    g = create_group(m['id'], 'Tech')
    assert client.delete(f"/api/stock-groups/{g['id']}").status_code == 204
    assert client.get(f"/api/stock-groups/{g['id']}").status_code == 404
    assert client.delete(f"/api/stock-groups/{g['id']}").status_code == 404


def test_add_stock_is_idempotent(client, create_member, create_stock, create_group):
    m = create_member()
    s = create_stock('2330', 'TSMC')
    g = create_group(m['id'], 'Tech')
    r = client.post(f"/api/stock-groups/{g['id']}/stocks/{s['id']}")
    assert r.status_code == 200
    assert [x['id'] for x in r.json()['stocks']] == [s['id']]
    r = client.post(f"/api/stock-groups/{g['id']}/stocks/{s['id']}")
    assert r.status_code == 200
    assert [x['id'] for x in r.json()['stocks']] == [s['id']]


def test_add_missing_stock_or_group_is_404(client, create_member, create_stock, create_group):
    m = create_member()
    s = create_stock('2330', 'TSMC')
    g = create_group(m['id'], 'Tech')
    assert client.post(f"/api/stock-groups/{g['id']}/stocks/999").status_code == 404
    assert client.post(f"/api/stock-groups/999/stocks/{s['id']}").status_code == 404
    assert client.get(f"/api/stock-groups/{g['id']}/stocks").json() == []


def test_remove_stock(client, create_member, create_stock, create_group):
    m = create_member()
    s1 = create_stock('2330', 'TSMC')
    s2 = create_stock('2454', 'MediaTek')
    g = create_group(m['id'], 'Tech')
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s1['id']}")
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s2['id']}")
    r = client.delete(f"/api/stock-groups/{g['id']}/stocks/{s1['id']}")
    assert r.status_code == 200
    assert [x['id'] for x in r.json()['stocks']] == [s2['id']]


def test_remove_absent_stock_is_404_and_leaves_group_alone(client, create_member, create_stock, create_group):
    m = create_member()
    s1 = create_stock('2330', 'TSMC')
    s2 = create_stock('2454', 'MediaTek')
    g = create_group(m['id'], 'Tech')
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s1['id']}")
    before = client.get(f"/api/stock-groups/{g['id']}").json()
    r = client.delete(f"/api/stock-groups/{g['id']}/stocks/{s2['id']}")
    assert r.status_code == 404
    assert client.get(f"/api/stock-groups/{g['id']}").json() == before
    assert client.delete(f"/api/stock-groups/{g['id']}/stocks/999").status_code == 404
    assert client.delete(f"/api/stock-groups/999/stocks/{s1['id']}").status_code == 404


def test_list_group_stocks(client, create_member, create_stock, create_group):
    m = create_member()
    s1 = create_stock('2330', 'TSMC')
    s2 = create_stock('2454', 'MediaTek')
    g = create_group(m['id'], 'Tech')
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s2['id']}")
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s1['id']}")
    r = client.get(f"/api/stock-groups/{g['id']}/stocks")
    assert r.status_code == 200
    assert [x['code'] for x in r.json()] == ['2330', '2454']
    assert client.get('/api/stock-groups/999/stocks').status_code == 404


def test_groups_by_member(client, create_member, create_group):
    m = create_member()
    other = create_member()
    # no groups yet is reported as 404, same as a missing member
    assert client.get(f"/api/stock-groups/member/{m['id']}").status_code == 404
    assert client.get('/api/stock-groups/member/999').status_code == 404
    g1 = create_group(m['id'], 'Tech')
    g2 = create_group(m['id'], 'Green')
    create_group(other['id'], 'Other')
    r = client.get(f"/api/stock-groups/member/{m['id']}")
    assert r.status_code == 200
    assert [g['id'] for g in r.json()] == [g1['id'], g2['id']]


def test_deleting_member_cascades_to_groups(client, create_member, create_stock, create_group):
    m = create_member()
    s = create_stock('2330', 'TSMC')
    g1 = create_group(m['id'], 'Tech')
    g2 = create_group(m['id'], 'Green')
    client.post(f"/api/stock-groups/{g1['id']}/stocks/{s['id']}")
    assert client.delete(f"/api/members/{m['id']}").status_code == 204
    assert client.get(f"/api/stock-groups/{g1['id']}").status_code == 404
    assert client.get(f"/api/stock-groups/{g2['id']}").status_code == 404
    assert client.get('/api/stock-groups').json() == []
    # stocks are referenced, not owned
    assert client.get(f"/api/stocks/{s['id']}").status_code == 200
    # the freed name can be reused
    other = create_member()
    assert client.post(f"/api/stock-groups/member/{other['id']}", json={'name': 'Tech'}).status_code == 201


def test_deleting_stock_removes_membership_only(client, create_member, create_stock, create_group):
    m = create_member()
    s = create_stock('2330', 'TSMC')
    g = create_group(m['id'], 'Tech')
    client.post(f"/api/stock-groups/{g['id']}/stocks/{s['id']}")
    assert client.delete(f"/api/stocks/{s['id']}").status_code == 204
    got = client.get(f"/api/stock-groups/{g['id']}")
    assert got.status_code == 200
    assert got.json()['stocks'] == []

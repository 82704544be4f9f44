"""Template sources shared by the benchmark modules."""

MINIMAL = "{{=it.title}}"

SMALL = """\
<ul>
{{~ it.items :item }}
  <li>{{=item.name}}</li>
{{~}}
</ul>
"""

MEDIUM = """\
{{? it.user }}
  <div class="profile">
    <h1>{{=it.user.name}}</h1>
    {{? it.user.admin }}<span>admin</span>{{?}}
    {{~ it.items :item:i }}
      <article id="row-{{=i}}">
        <h2>{{=item.name}}</h2>
        {{? item.price }}<p>{{= '%.2f' % item.price }}</p>{{??}}<p>n/a</p>{{?}}
        {{~ item.tags :tag }}<em>{{=tag}}</em>{{~}}
      </article>
    {{~}}
  </div>
{{??}}
  <p>Please log in.</p>
{{?}}
"""

LARGE = MEDIUM * 20

DEFINES = """\
{{##def.row:r:<tr><td>{{=r.id}}</td><td>{{=r.name}}</td></tr>#}}
<table>{{~ it.items :item }}{{#def.row:item}}{{~}}</table>
"""
